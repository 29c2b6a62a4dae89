"""Structured Logging — tests for JSONFormatter and setup_logging."""

import json
import logging

from bart.infrastructure.observability import JSONFormatter, setup_logging


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "bart.test", logging.INFO, __file__, 1, msg, None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "bart.test"
    assert log["message"] == "hello"
    assert "timestamp" in log


def test_json_formatter_includes_game_extras():
    record = _record(session_id="abc", round_index=3, event="popped", pumps=5)
    log = json.loads(JSONFormatter().format(record))
    assert log["session_id"] == "abc"
    assert log["round_index"] == 3
    assert log["event"] == "popped"
    assert log["pumps"] == 5


def test_json_formatter_skips_unknown_and_none_extras():
    log = json.loads(JSONFormatter().format(_record(secret="x", session_id=None)))
    assert "secret" not in log
    assert "session_id" not in log


def test_setup_logging_is_idempotent():
    root = logging.root
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("WARNING", "text")
        named = [h for h in root.handlers if h.get_name() == "bart"]
        assert named == [second]
        assert first not in root.handlers
        assert root.level == logging.WARNING
        assert not isinstance(second.formatter, JSONFormatter)
    finally:
        root.handlers[:] = original_handlers
        root.setLevel(original_level)
