"""Tests for setup_logging."""

import logging

import pytest

from devloop.config import ConfigurationError
from devloop.logging_config import CONSOLE_PREFIX, setup_logging


def test_console_lines_carry_prefix(capsys):
    setup_logging()

    logging.getLogger("devloop.test").info("tests passed")

    assert capsys.readouterr().out == f"{CONSOLE_PREFIX} tests passed\n"


def test_repeated_setup_does_not_duplicate_handlers():
    setup_logging()
    setup_logging()

    assert len(logging.getLogger().handlers) == 1


def test_level_comes_from_environment(monkeypatch):
    monkeypatch.setenv("DEVLOOP_LOG_LEVEL", "warning")

    setup_logging()

    assert logging.getLogger().level == logging.WARNING


def test_unknown_level_is_configuration_error():
    with pytest.raises(ConfigurationError, match="DEVLOOP_LOG_LEVEL"):
        setup_logging("chatty")


def test_file_log_written_when_configured(monkeypatch, tmp_path):
    log_path = tmp_path / "logs" / "devloop.log"
    monkeypatch.setenv("DEVLOOP_LOG_FILE", str(log_path))

    setup_logging()
    logging.getLogger("devloop.test").info("build successful")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "devloop.test - INFO - build successful" in log_path.read_text()
