# tests/test_logging_config.py

import logging
from collections.abc import Iterator

import pytest

from tabular_integrity.logging_config import configure_logging

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    yield
    package_logger = logging.getLogger("tabular_integrity")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def test_configure_logging_uses_given_level() -> None:
    """
    ARRANGE: level "debug"
    ACT:     configure_logging
    ASSERT:  package logger set to DEBUG
    """
    configure_logging("debug")

    actual = logging.getLogger("tabular_integrity").level

    assert actual == logging.DEBUG


def test_configure_logging_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    ARRANGE: TABULAR_INTEGRITY_LOG_LEVEL=INFO
    ACT:     configure_logging without a level
    ASSERT:  package logger set to INFO
    """
    monkeypatch.setenv("TABULAR_INTEGRITY_LOG_LEVEL", "INFO")

    configure_logging()

    actual = logging.getLogger("tabular_integrity").level

    assert actual == logging.INFO


def test_configure_logging_defaults_to_warning(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    ARRANGE: no level and no environment override
    ACT:     configure_logging
    ASSERT:  package logger set to WARNING
    """
    monkeypatch.delenv("TABULAR_INTEGRITY_LOG_LEVEL", raising=False)

    configure_logging()

    actual = logging.getLogger("tabular_integrity").level

    assert actual == logging.WARNING


def test_configure_logging_ignores_unknown_level() -> None:
    """
    ARRANGE: level "chatty"
    ACT:     configure_logging
    ASSERT:  falls back to WARNING
    """
    configure_logging("chatty")

    actual = logging.getLogger("tabular_integrity").level

    assert actual == logging.WARNING


def test_configure_logging_leaves_other_loggers_enabled() -> None:
    """
    ARRANGE: logger created before configuration
    ACT:     configure_logging
    ASSERT:  existing logger not disabled
    """
    other = logging.getLogger("some.library")

    configure_logging("info")

    assert other.disabled is False
