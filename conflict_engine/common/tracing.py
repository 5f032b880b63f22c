"""Check-scoped context for correlating log lines.

Each conflict check runs inside ``check_context``, which stores a check id in a
context variable. Log filters read it so every line written during one
evaluation (including from fetch worker threads) carries the same id.
"""

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from logging import getLogger

logger = getLogger(__name__)

ctx_check_id: contextvars.ContextVar[str] = contextvars.ContextVar("check_id", default="")


def new_check_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def check_context(check_id: str | None = None) -> Iterator[str]:
    """Set the current check id for the duration of the block.

    Args:
        check_id: Id to use; a random one is generated when not given

    Yields:
        The check id in effect
    """
    check_id = check_id or new_check_id()
    token = ctx_check_id.set(check_id)
    try:
        yield check_id
    finally:
        ctx_check_id.reset(token)
