"""Tests for JSON structured logging."""
import json
import logging
import sys


def _record(name: str, level: int, msg: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def test_json_formatter_outputs_valid_json() -> None:
    """JSONFormatter should produce valid JSON output."""
    from moodboard.core.logging import JSONFormatter
    output = JSONFormatter().format(_record("test-service", logging.INFO, "test message"))
    assert isinstance(json.loads(output), dict)


def test_json_formatter_has_required_fields() -> None:
    """Log output must contain timestamp, level, service, message fields."""
    from moodboard.core.logging import JSONFormatter
    parsed = json.loads(
        JSONFormatter().format(_record("my-service", logging.WARNING, "something happened"))
    )

    assert "timestamp" in parsed
    assert parsed["level"] == "WARNING"
    assert parsed["service"] == "my-service"
    assert parsed["message"] == "something happened"


def test_json_formatter_includes_error_type_on_exception() -> None:
    """Log output should include error_type field when an exception is attached."""
    from moodboard.core.logging import JSONFormatter
    try:
        raise ValueError("test error")
    except ValueError:
        exc_info = sys.exc_info()

    parsed = json.loads(
        JSONFormatter().format(_record("error-service", logging.ERROR, "an error occurred", exc_info))
    )

    assert parsed["error_type"] == "ValueError"
    assert "test error" in parsed["error_detail"]


def test_json_formatter_includes_extra_fields() -> None:
    """Fields passed through ``extra`` should appear in the JSON output."""
    from moodboard.core.logging import JSONFormatter
    record = _record("image", logging.ERROR, "generation failed")
    record.attempt = 2
    record.error_type = "RuntimeError"

    parsed = json.loads(JSONFormatter().format(record))

    assert parsed["attempt"] == 2
    assert parsed["error_type"] == "RuntimeError"


def test_setup_logging_returns_logger() -> None:
    """setup_logging() should return a configured Logger instance."""
    from moodboard.core.logging import setup_logging
    logger = setup_logging("test-app")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "test-app"


def test_setup_logging_does_not_duplicate_handlers() -> None:
    from moodboard.core.logging import setup_logging
    first = setup_logging("dedupe-app")
    second = setup_logging("dedupe-app")
    assert first is second
    assert len(second.handlers) == 1
