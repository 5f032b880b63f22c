"""Shared logging and tracing helpers."""

from conflict_engine.common.log_utils import CheckContextFilter, configure_logging
from conflict_engine.common.tracing import check_context, ctx_check_id, new_check_id

__all__ = [
    "CheckContextFilter",
    "configure_logging",
    "check_context",
    "ctx_check_id",
    "new_check_id",
]
