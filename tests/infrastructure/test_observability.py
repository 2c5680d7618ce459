"""Structured logging: JSONFormatter output and setup_logging."""

import json
import logging

from tracker.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "tracker.services.task_operations", logging.WARNING, __file__, 1,
        "update_task failed: %s", ("boom",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "tracker.services.task_operations"
    assert payload["message"] == "update_task failed: boom"
    assert "timestamp" in payload


def test_formatter_surfaces_known_extras_only():
    record = _record(operation="update_task", task_id=5, error_code="UNAUTHORIZED",
                     token="secret")
    payload = json.loads(JSONFormatter().format(record))
    assert payload["operation"] == "update_task"
    assert payload["task_id"] == 5
    assert payload["error_code"] == "UNAUTHORIZED"
    assert "token" not in payload


def test_formatter_uses_record_creation_time():
    record = _record()
    record.created = 0.0
    payload = json.loads(JSONFormatter().format(record))
    assert payload["timestamp"] == "1970-01-01T00:00:00+00:00"


def test_formatter_stringifies_unencodable_extras():
    payload = json.loads(JSONFormatter().format(_record(card_id=frozenset())))
    assert payload["card_id"] == "frozenset()"


def test_formatter_skips_none_extras():
    payload = json.loads(JSONFormatter().format(_record(status_code=None)))
    assert "status_code" not in payload


def test_setup_logging_installs_handler():
    logger = logging.getLogger("tracker")
    handler = setup_logging("debug", "json")
    try:
        assert handler in logger.handlers
        assert isinstance(handler.formatter, JSONFormatter)
        assert logger.level == logging.DEBUG
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_setup_logging_plain_format():
    logger = logging.getLogger("tracker")
    handler = setup_logging("INFO", "text")
    try:
        assert not isinstance(handler.formatter, JSONFormatter)
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
