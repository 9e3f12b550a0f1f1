"""
Tests for core/logging_config.py - logger setup.

Tests cover:
- Child logger naming
- Console and file handlers
- Handler replacement on re-configuration
"""

import logging
from datetime import datetime
from pathlib import Path

import pytest

from core.logging_config import (
    ROOT_LOGGER_NAME,
    current_log_file,
    get_logger,
    log_file_name,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave the prescribing logger with console output only after each test."""
    yield
    setup_logging(console=False)


class TestGetLogger:
    """Test child logger naming."""

    def test_prefixes_module_name(self):
        assert get_logger("data_processing.loader").name == "prescribing.data_processing.loader"

    def test_already_prefixed(self):
        assert get_logger("prescribing.cli").name == "prescribing.cli"

    def test_root_name(self):
        assert get_logger(ROOT_LOGGER_NAME) is logging.getLogger(ROOT_LOGGER_NAME)


class TestLogFileName:
    """Test timestamped file names."""

    def test_format(self):
        when = datetime(2019, 12, 31, 23, 59, 58)
        assert log_file_name("seasonal_report", when) == "seasonal_report_20191231_235958.log"

    def test_default_prefix(self):
        assert log_file_name().startswith("prescribing_")


class TestSetupLogging:
    """Test handler configuration."""

    def test_console_only(self):
        """Without file logging there should be no log file."""
        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert current_log_file() is None

    def test_file_logging(self, temp_dir: Path):
        """Messages should reach a prefixed file in the given directory."""
        setup_logging(
            log_dir=temp_dir / "logs",
            console=False,
            file_logging=True,
            log_prefix="seasonal_report",
        )
        get_logger("tests").info("hello from the test")

        log_path = current_log_file()
        assert log_path is not None
        assert log_path.parent == temp_dir / "logs"
        assert log_path.name.startswith("seasonal_report_")

        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        assert "hello from the test" in log_path.read_text(encoding="utf-8")

    def test_reconfigure_replaces_handlers(self, temp_dir: Path):
        """A second call should close the first file handler, not add to it."""
        setup_logging(log_dir=temp_dir, console=True, file_logging=True)
        first = [h for h in logging.getLogger(ROOT_LOGGER_NAME).handlers]

        logger = setup_logging(console=True)

        assert len(logger.handlers) == 1
        file_handlers = [h for h in first if isinstance(h, logging.FileHandler)]
        assert file_handlers and file_handlers[0].stream is None

    def test_level_applied(self):
        logger = setup_logging(level=logging.DEBUG, console=True)
        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.DEBUG
