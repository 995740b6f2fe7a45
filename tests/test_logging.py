"""
Tests for log formatting, log context and correlation ids.
"""

import json
import logging

from fastapi.testclient import TestClient

from marketplace import application
from marketplace.logging import (
    HumanReadableFormatter,
    StructuredJSONFormatter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from marketplace.middlewares.correlation_id import set_correlation_id


def make_record(level=logging.ERROR, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="marketplace",
        level=level,
        pathname=__file__,
        lineno=10,
        msg="Session %s rejected",
        args=("s-1",),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


class TestStructuredJSONFormatter:
    def test_includes_context_and_extra(self):
        set_correlation_id("abcdef123456")
        set_log_context(connection_id="c-1")
        try:
            payload = json.loads(
                StructuredJSONFormatter().format(make_record(pkg_id=3))
            )
        finally:
            clear_log_context()
            set_correlation_id("")

        assert payload["message"] == "Session s-1 rejected"
        assert payload["level"] == "ERROR"
        assert payload["request_id"] == "abcdef12"
        assert payload["connection_id"] == "c-1"
        assert payload["pkg_id"] == 3


class TestHumanReadableFormatter:
    def test_info_is_short(self):
        line = HumanReadableFormatter().format(make_record(logging.INFO))

        assert "INFO: Session s-1 rejected" in line
        assert "test_logging" not in line

    def test_errors_include_location(self):
        line = HumanReadableFormatter().format(make_record())

        assert ":10 - Session s-1 rejected" in line


class TestLogContext:
    def test_set_merges_and_clear_resets(self):
        clear_log_context()
        set_log_context(user_id="u-1")
        set_log_context(session_id="s-1")

        assert get_log_context() == {"user_id": "u-1", "session_id": "s-1"}

        clear_log_context()
        assert get_log_context() == {}


class TestCorrelationIDMiddleware:
    def test_echoes_header(self):
        response = TestClient(application()).get(
            "/metrics", headers={"X-Correlation-ID": "1234567890"}
        )

        assert response.headers["X-Correlation-ID"] == "12345678"

    def test_generates_id(self):
        response = TestClient(application()).get("/metrics")

        assert len(response.headers["X-Correlation-ID"]) == 8
