"""Tests for billing/core/logging_setup.py"""

from __future__ import annotations

import json
import logging
import sys

from billing.core.config import LoggingSettings
from billing.core.logging_setup import JSONFormatter, configure_logging


def _record(msg: str, *args, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("billing.test", logging.WARNING, __file__, 10, msg, args, exc_info)


class TestJSONFormatter:
    def test_single_line_payload(self) -> None:
        line = JSONFormatter().format(_record("Intent %s completed", "abc"))
        payload = json.loads(line)
        assert "\n" not in line
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "billing.test"
        assert payload["message"] == "Intent abc completed"
        assert "timestamp" in payload
        assert set(payload) == {"timestamp", "level", "logger", "message"}

    def test_includes_traceback(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed", exc_info=sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc_info"]


class TestConfigureLogging:
    def test_installs_single_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging(LoggingSettings(level="debug", json_format=True))
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
