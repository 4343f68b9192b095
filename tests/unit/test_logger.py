"""Unit tests for logging infrastructure."""

import json
import logging
import sys

import pytest

from recipe_generation.models.models import AttemptOutcome, ProviderAttempt
from recipe_generation.utils.logger import JSONFormatter, RichTextFormatter, get_logger, logger


def _record(msg: str = "Test message", level: int = logging.INFO, name: str = "test_logger", exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def _fresh_logger_name(name: str) -> str:
    if name in logging.Logger.manager.loggerDict:
        logging.getLogger(name).handlers.clear()
    return name


class TestJSONFormatter:
    """Test JSONFormatter produces valid JSON output."""

    def test_json_formatter_outputs_valid_json(self):
        """Test that JSONFormatter produces valid JSON."""
        parsed = json.loads(JSONFormatter().format(_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test_logger"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_includes_exception_traceback(self):
        """Test that JSONFormatter includes exception traceback when present."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = _record("Error occurred", level=logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert "exception" in parsed
        assert "ValueError" in parsed["exception"]

    def test_json_formatter_includes_provider_attempt_fields(self):
        """Attempt extras become top-level JSON keys."""
        attempt = ProviderAttempt(
            provider_name="gemini",
            attempt_number=2,
            outcome=AttemptOutcome.TIMEOUT,
            latency_ms=30001,
        )
        record = _record("attempt failed")
        for key, value in attempt.log_extra().items():
            setattr(record, key, value)

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["provider"] == "gemini"
        assert parsed["attempt"] == 2
        assert parsed["outcome"] == "timeout"
        assert parsed["latency_ms"] == 30001

    def test_json_formatter_includes_subject(self):
        record = _record()
        record.subject = "Margherita Pizza"

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["subject"] == "Margherita Pizza"

    def test_json_formatter_omits_absent_extras(self):
        parsed = json.loads(JSONFormatter().format(_record()))

        assert "provider" not in parsed
        assert "latency_ms" not in parsed


class TestRichTextFormatter:
    """Test RichTextFormatter produces colored text output."""

    @pytest.mark.parametrize(
        "level,icon",
        [
            (logging.DEBUG, "🔍"),
            (logging.INFO, "ℹ️"),
            (logging.WARNING, "⚠️"),
            (logging.ERROR, "❌"),
        ],
    )
    def test_rich_text_formatter_includes_emoji_icon(self, level, icon):
        """Test that RichTextFormatter includes emoji icons for each level."""
        assert icon in RichTextFormatter().format(_record(level=level))

    def test_rich_text_formatter_includes_level_logger_and_message(self):
        output = RichTextFormatter().format(_record("Custom message", name="my_logger"))

        assert "INFO" in output
        assert "my_logger" in output
        assert "Custom message" in output

    def test_rich_text_formatter_includes_exception_traceback(self):
        """Test that RichTextFormatter includes exception traceback."""
        try:
            raise RuntimeError("Test error")
        except RuntimeError:
            record = _record("Error occurred", level=logging.ERROR, exc_info=sys.exc_info())

        output = RichTextFormatter().format(record)

        assert "RuntimeError" in output
        assert "Test error" in output


class TestGetLogger:
    """Test get_logger function."""

    def test_get_logger_returns_logger_instance(self):
        assert isinstance(get_logger("test_module"), logging.Logger)

    def test_get_logger_does_not_duplicate_handlers(self):
        """Repeated calls for one name reuse the configured logger."""
        name = _fresh_logger_name("test_module_2")
        first = get_logger(name)
        second = get_logger(name)

        assert first is second
        assert len(second.handlers) == 1

    def test_get_logger_respects_log_level_env(self, monkeypatch):
        name = _fresh_logger_name("test_level_logger")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        assert get_logger(name).level == logging.DEBUG

    def test_invalid_log_level_defaults_to_info(self, monkeypatch):
        name = _fresh_logger_name("test_invalid_level")
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        assert get_logger(name).level == logging.INFO

    def test_get_logger_uses_json_formatter(self, monkeypatch):
        name = _fresh_logger_name("test_json_logger")
        monkeypatch.setenv("LOG_TYPE", "json")

        assert isinstance(get_logger(name).handlers[0].formatter, JSONFormatter)

    def test_log_type_text_default(self, monkeypatch):
        name = _fresh_logger_name("test_default_type")
        monkeypatch.delenv("LOG_TYPE", raising=False)

        assert isinstance(get_logger(name).handlers[0].formatter, RichTextFormatter)


class TestModuleLevelLogger:
    """Test module-level logger instance."""

    def test_logger_name(self):
        assert logger.name == "recipe_generation"

    def test_logger_has_handlers(self):
        assert len(logger.handlers) > 0

    def test_provider_client_loggers_quieted(self):
        assert logging.getLogger("google.genai").level == logging.WARNING
        assert logging.getLogger("aiohttp").level == logging.WARNING
