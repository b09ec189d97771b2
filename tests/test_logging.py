"""Tests for structured logging behavior."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
import unittest

from study_buddy.logging_utils import JsonFormatter, configure_logging, log_event
from study_buddy.models import SubmitOrigin


class JsonFormatterTests(unittest.TestCase):
    """Validate log format and event helper."""

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord(
            name="study_buddy.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="state transition",
            args=(),
            exc_info=None,
        )

    def test_json_formatter_includes_structured_fields(self) -> None:
        record = self._record()
        record.event = "controller.submit.sent"
        record.origin = SubmitOrigin.SUGGESTION

        data = json.loads(JsonFormatter().format(record))
        self.assertEqual(data["event"], "controller.submit.sent")
        self.assertEqual(data["origin"], "suggestion")
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["logger"], "study_buddy.test")
        self.assertNotIn("lineno", data)

    def test_log_event_sets_event_extra(self) -> None:
        logger = logging.getLogger("study_buddy.test.events")
        with self.assertLogs(logger, level="INFO") as logs:
            log_event(logger, logging.INFO, "backend.request.start", chars=5)
        record = logs.records[0]
        self.assertEqual(record.getMessage(), "backend.request.start")
        self.assertEqual(record.event, "backend.request.start")  # type: ignore[attr-defined]
        self.assertEqual(record.chars, 5)  # type: ignore[attr-defined]


class ConfigureLoggingTests(unittest.TestCase):
    """Validate configure_logging() handler setup behavior."""

    def setUp(self) -> None:
        # Preserve root logger state so tests do not pollute each other.
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        for handler in root.handlers:
            if handler not in self._original_handlers:
                handler.close()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)

    def _stream_handlers(self) -> list[logging.Handler]:
        return [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def test_structured_uses_json_formatter(self) -> None:
        configure_logging({"level": "DEBUG", "structured": True, "log_to_file": False})
        formatters = [h.formatter for h in logging.getLogger().handlers]
        self.assertTrue(any(isinstance(f, JsonFormatter) for f in formatters))

    def test_plain_formatter_when_not_structured(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        formatters = [h.formatter for h in logging.getLogger().handlers]
        self.assertFalse(any(isinstance(f, JsonFormatter) for f in formatters))

    def test_sets_root_level_and_quiets_http_loggers(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        for name in ("httpx", "httpcore"):
            self.assertEqual(logging.getLogger(name).level, logging.WARNING)

    def test_console_is_warning_or_above(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        handlers = self._stream_handlers()
        self.assertTrue(handlers)
        self.assertEqual(handlers[0].level, logging.WARNING)

    def test_file_handler_created(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = str(Path(tmp) / "nested" / "test.log")
            configure_logging(
                {
                    "level": "DEBUG",
                    "structured": False,
                    "log_to_file": True,
                    "log_file_path": log_path,
                }
            )
            file_handlers = [
                h
                for h in logging.getLogger().handlers
                if isinstance(h, logging.FileHandler)
            ]
            self.assertEqual(len(file_handlers), 1)
            self.assertTrue(Path(log_path).exists())
            for handler in file_handlers:
                handler.close()

    def test_stderr_handler_filters_to_app_loggers(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        handler = self._stream_handlers()[0]
        app_record = logging.LogRecord(
            name="study_buddy.controller",
            level=logging.WARNING,
            pathname="",
            lineno=0,
            msg="ok",
            args=(),
            exc_info=None,
        )
        other_record = logging.LogRecord(
            name="httpx",
            level=logging.WARNING,
            pathname="",
            lineno=0,
            msg="noise",
            args=(),
            exc_info=None,
        )
        self.assertTrue(handler.filter(app_record))
        self.assertFalse(handler.filter(other_record))


if __name__ == "__main__":
    unittest.main()
