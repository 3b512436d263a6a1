"""Tests for console logging setup."""

import logging

import pytest

from sshforge.utils.console import ColorfulFormatter, configure_logging


@pytest.fixture
def clean_logger():
    """Restore the sshforge logger after each test."""
    package_logger = logging.getLogger("sshforge")
    saved = (list(package_logger.handlers), package_logger.level, package_logger.propagate)
    package_logger.handlers.clear()
    yield package_logger
    package_logger.handlers[:] = saved[0]
    package_logger.setLevel(saved[1])
    package_logger.propagate = saved[2]


def _record(name: str, msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_formatter_plain_output():
    """Formatter without colors shows level, component and message."""
    formatter = ColorfulFormatter(use_colors=False)
    line = formatter.format(_record("sshforge.services.process", "Session to host:22 open"))

    assert "INFO" in line
    assert "services.process" in line
    assert "sshforge.services" not in line
    assert line.endswith("Session to host:22 open")
    assert "\033[" not in line


def test_formatter_colors():
    """Formatter with colors emits ANSI codes."""
    formatter = ColorfulFormatter(use_colors=True)
    line = formatter.format(_record("sshforge.config", "hello", logging.WARNING))
    assert "\033[" in line


def test_configure_logging_adds_single_handler(clean_logger):
    """Repeated configuration does not stack handlers."""
    configure_logging("DEBUG", use_colors=False)
    configure_logging("DEBUG", use_colors=False)

    assert len(clean_logger.handlers) == 1
    assert clean_logger.level == logging.DEBUG
    assert clean_logger.propagate is False
    assert logging.getLogger("asyncssh").level == logging.WARNING


def test_configure_logging_reads_env(clean_logger, monkeypatch):
    """Level falls back to SSHFORGE_LOG_LEVEL."""
    monkeypatch.setenv("SSHFORGE_LOG_LEVEL", "warning")
    configure_logging(use_colors=False)
    assert clean_logger.level == logging.WARNING
