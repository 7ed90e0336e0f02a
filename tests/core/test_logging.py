"""Tests for logging configuration."""

import json
import logging

from prd_concierge.core.logging import ContextFilter, JSONFormatter, LogContext


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("prd_concierge.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "prd_concierge.test"
        assert data["message"] == "hello"

    def test_extra_fields_included(self):
        data = json.loads(JSONFormatter().format(_record(session_id="ss_1")))
        assert data["session_id"] == "ss_1"

    def test_non_ascii_preserved(self):
        assert "博客" in JSONFormatter().format(_record("博客"))


class TestLogContext:

    def test_fields_scoped(self):
        with LogContext(session_id="ss_1"):
            assert LogContext.current()["session_id"] == "ss_1"
            with LogContext(session_id="ss_2"):
                assert LogContext.current()["session_id"] == "ss_2"
            assert LogContext.current()["session_id"] == "ss_1"
        assert "session_id" not in LogContext.current()

    def test_filter_copies_context(self):
        record = _record()
        with LogContext(request_id="req-1"):
            ContextFilter().filter(record)
        assert record.request_id == "req-1"

    def test_filter_keeps_explicit_extra(self):
        record = _record(request_id="explicit")
        with LogContext(request_id="req-1"):
            ContextFilter().filter(record)
        assert record.request_id == "explicit"
