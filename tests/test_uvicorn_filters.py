"""
Tests for the uvicorn access log filter and server log config.
"""

import logging

import pytest

from marketplace.uvicorn_filters import ExcludeMetricsFilter
from run_server import log_config


def access_record(path: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "GET %s HTTP/1.1" 200',
        args=("127.0.0.1:5000", path),
        exc_info=None,
    )


@pytest.mark.parametrize(
    "path, logged",
    [("/metrics", False), ("/health", False), ("/notifications", True)],
)
def test_filter_uses_settings(path, logged):
    assert ExcludeMetricsFilter().filter(access_record(path)) is logged


def test_filter_custom_paths():
    log_filter = ExcludeMetricsFilter(excluded_paths=["/ws"])

    assert log_filter.filter(access_record("/ws")) is False
    assert log_filter.filter(access_record("/metrics")) is True


def test_log_config_attaches_filter():
    config = log_config()

    assert config["handlers"]["access"]["filters"] == ["exclude_metrics"]
    assert (
        config["filters"]["exclude_metrics"]["()"]
        == "marketplace.uvicorn_filters.ExcludeMetricsFilter"
    )
