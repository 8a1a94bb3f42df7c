"""Pytest configuration for lfshook tests."""

import logging

import pytest
import structlog


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


def make_record(
    msg: str = "hello",
    level: int = logging.INFO,
    name: str = "test",
    args: tuple = (),
    **extra: object,
) -> logging.LogRecord:
    """Build a LogRecord the way logging.Logger.makeRecord would."""
    record = logging.LogRecord(name, level, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def record_factory():
    return make_record
