"""Logging setup tests."""

import logging

import pytest

from browser_relay.logging_config import NOISY_LOGGERS, HealthCheckFilter, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    names = ("", "uvicorn", "uvicorn.error", *NOISY_LOGGERS)
    saved = {}
    for name in names:
        lg = logging.getLogger(name)
        saved[name] = (lg.level, list(lg.handlers), list(lg.filters), lg.propagate)
    yield
    for name, (level, handlers, filters, propagate) in saved.items():
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.handlers[:] = handlers
        lg.filters[:] = filters
        lg.propagate = propagate


def _access_record(path: str) -> logging.LogRecord:
    return logging.LogRecord(
        "uvicorn.access",
        logging.INFO,
        __file__,
        1,
        '%s - "%s %s HTTP/%s" %d',
        ("127.0.0.1:5000", "GET", path, "1.1", 200),
        None,
    )


def test_noisy_loggers_raised_to_warning_at_info():
    setup_logging("INFO")

    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
    assert logging.getLogger().level == logging.INFO


def test_noisy_loggers_follow_debug_level():
    setup_logging("DEBUG")

    assert logging.getLogger("httpx").level == logging.DEBUG
    assert logging.getLogger("uvicorn.access").level == logging.DEBUG


def test_health_filter_installed_once():
    setup_logging("INFO")
    setup_logging("INFO")

    filters = [f for f in logging.getLogger("uvicorn.access").filters if isinstance(f, HealthCheckFilter)]
    assert len(filters) == 1


def test_health_probe_access_lines_dropped():
    health_filter = HealthCheckFilter()

    assert health_filter.filter(_access_record("/health")) is False
    assert health_filter.filter(_access_record("/")) is True
