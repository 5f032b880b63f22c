"""Unit tests for logging configuration and check context."""

import json
import logging
import logging.config

import pytest

from conflict_engine.common import (
    CheckContextFilter,
    check_context,
    configure_logging,
    ctx_check_id,
)
from conflict_engine.common.log_utils import DEFAULT_LOGGING_CONFIG


def _record() -> logging.LogRecord:
    return logging.LogRecord("conflict_engine.test", logging.INFO, __file__, 1, "msg", None, None)


def test_check_context_sets_and_resets_id():
    with check_context("check-123") as check_id:
        assert check_id == "check-123"
        assert ctx_check_id.get() == "check-123"

    assert ctx_check_id.get() == ""


def test_check_context_generates_id():
    with check_context() as check_id:
        assert len(check_id) == 32


def test_filter_adds_check_id_inside_context():
    """Test that records written during a check carry its id."""
    log_filter = CheckContextFilter()
    record = _record()

    with check_context("check-123"):
        assert log_filter.filter(record) is True

    assert record.check_id == "check-123"
    assert record.conflict_check == {"id": "check-123"}


def test_filter_marks_records_outside_context():
    record = _record()

    assert CheckContextFilter().filter(record) is True
    assert record.check_id == "-"
    assert not hasattr(record, "conflict_check")


def test_configure_logging_applies_dict_config(tmp_path, monkeypatch):
    """Test that a JSON logging file is loaded through dictConfig."""
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {"conflict_engine": {"level": "WARNING"}},
    }
    config_path = tmp_path / "logging.json"
    config_path.write_text(json.dumps(config))
    applied = []
    monkeypatch.setattr(logging.config, "dictConfig", applied.append)

    configure_logging(config_path)

    assert applied == [config]


def test_configure_logging_falls_back_to_basic_config(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging(tmp_path / "missing.json")

    assert calls[0]["level"] == logging.INFO
    assert '"message": "%(message)s"' in calls[0]["format"]
    assert '"check_id": "%(check_id)s"' in calls[0]["format"]


@pytest.fixture
def engine_logger():
    """Restore the package logger after a test applies the shipped logging.json."""
    logger = logging.getLogger("conflict_engine")
    level, handlers, propagate = logger.level, list(logger.handlers), logger.propagate
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = propagate


def test_shipped_logging_config_prints_check_id(engine_logger, capsys):
    """Test that lines written with the shipped config carry the check id."""
    assert DEFAULT_LOGGING_CONFIG.exists()
    configure_logging()
    service_logger = logging.getLogger("conflict_engine.services.conflict_detection")

    with check_context("check-123"):
        service_logger.info("Conflict check started")
    service_logger.info("Batch conflict check done")

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith("[check=check-123] Conflict check started")
    assert lines[1].endswith("[check=-] Batch conflict check done")
