"""Tests for structured logging."""

import json
import logging

import pytest

from feedback.logging_config import JSONFormatter, get_logger, setup_logging


def make_record(msg: str, args=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord("feedback.test", logging.INFO, __file__, 10, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Put the root logger back after setup_logging() replaced its handlers."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestJSONFormatter:
    """Tests for the JSON log format."""

    def test_fields(self):
        """Test the emitted record fields."""
        data = json.loads(JSONFormatter().format(make_record("Question %s sent", (100,))))

        assert data["level"] == "INFO"
        assert data["logger"] == "feedback.test"
        assert data["message"] == "Question 100 sent"
        assert data["line"] == 10
        assert "timestamp" in data
        assert "context" not in data

    def test_context_extra(self):
        """Test that a context extra is emitted as a nested object."""
        record = make_record("Question sent", context={"message_id": 100, "mode": "strict"})

        data = json.loads(JSONFormatter().format(record))

        assert data["context"] == {"message_id": 100, "mode": "strict"}

    def test_non_ascii_kept(self):
        """Test that non-ASCII text is not escaped."""
        assert "Ответ получен" in JSONFormatter().format(make_record("Ответ получен"))


class TestSetupLogging:
    """Tests for logging setup."""

    def test_writes_to_file(self, tmp_path, restore_root_logger):
        """Test that records reach the configured log file."""
        log_file = tmp_path / "logs" / "app.log"

        setup_logging(log_level="debug", log_file=str(log_file))
        get_logger("feedback.test").info("hello")
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "hello"
        assert restore_root_logger.level == logging.DEBUG

    def test_console_only(self, restore_root_logger):
        """Test that "-" disables the file handler."""
        setup_logging(log_file="-")

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0], logging.FileHandler)
