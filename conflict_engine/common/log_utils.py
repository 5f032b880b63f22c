"""Logging utilities for structured conflict-check logging.

Provides:
- configure_logging(): dictConfig from a JSON file, or a JSON-shaped basicConfig
- CheckContextFilter: adds the current conflict check id to log records
"""

import json
import logging
import logging.config
from pathlib import Path

from conflict_engine.common.tracing import ctx_check_id

logger = logging.getLogger(__name__)

DEFAULT_LOGGING_CONFIG = Path(__file__).parent.parent.parent / "logging.json"
NO_CHECK_ID = "-"


def configure_logging(config_path: Path | str | None = None, level: int = logging.INFO) -> None:
    """Configure logging for an application embedding the engine.

    Uses the dictConfig JSON file at ``config_path`` (default: logging.json at
    the repository root) when it exists, otherwise falls back to basicConfig
    with a JSON-shaped line format. Both formats print the check id, so the
    handlers they install carry a CheckContextFilter.
    """
    path = Path(config_path) if config_path else DEFAULT_LOGGING_CONFIG

    if path.exists():
        with open(path) as f:
            logging.config.dictConfig(json.load(f))
    else:
        logging.basicConfig(
            level=level,
            format=(
                '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
                '"logger": "%(name)s", "check_id": "%(check_id)s", "message": "%(message)s"}'
            ),
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        for handler in logging.getLogger().handlers:
            if not any(isinstance(f, CheckContextFilter) for f in handler.filters):
                handler.addFilter(CheckContextFilter())


class CheckContextFilter(logging.Filter):
    """Adds the conflict check id to log records.

    Enhances log records with:
    - check_id: id of the check in progress, or "-" outside a check
    - conflict_check.id: id of the check in progress, if any
    """

    def filter(self, record: logging.LogRecord) -> bool:
        check_id = ctx_check_id.get()
        record.check_id = check_id or NO_CHECK_ID
        if check_id:
            record.conflict_check = {"id": check_id}
        return True
