"""
Logging configuration for the SSRI seasonal prescribing analysis.

Every module logs through a child of the ``prescribing`` logger. The report
CLI attaches a console handler and, with --log-file, a timestamped file under
the report's output directory so each report keeps its own log next to the
tables and charts it produced.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


# Default log format: timestamp, level, module name, message
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Message-only format for console output
SIMPLE_FORMAT = "%(message)s"

ROOT_LOGGER_NAME = "prescribing"


def log_file_name(prefix: str = ROOT_LOGGER_NAME, when: Optional[datetime] = None) -> str:
    """Timestamped log file name, e.g. ``seasonal_report_20191231_235959.log``."""
    when = when or datetime.now()
    return f"{prefix}_{when.strftime('%Y%m%d_%H%M%S')}.log"


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    console: bool = True,
    file_logging: bool = False,
    simple_console: bool = False,
    log_prefix: str = ROOT_LOGGER_NAME,
) -> logging.Logger:
    """
    Configure the ``prescribing`` logger.

    Calling this again replaces (and closes) the handlers from the previous
    call, so a second report in the same process does not keep writing to
    the first report's log file.

    Args:
        level: Logging level (default: INFO)
        log_dir: Directory for log files (default: ./logs/)
        console: Whether to log to stdout (default: True)
        file_logging: Whether to also log to a timestamped file
        simple_console: Message-only console format
        log_prefix: Start of the log file name

    Returns:
        The configured ``prescribing`` logger

    Usage:
        # Console only
        logger = setup_logging()

        # Debug output, plus a log file beside the report outputs
        logger = setup_logging(
            level=logging.DEBUG,
            log_dir=paths.log_dir,
            file_logging=True,
            log_prefix="seasonal_report",
        )
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    _close_handlers(root_logger)
    root_logger.setLevel(level)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if simple_console:
            console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
        else:
            console_handler.setFormatter(
                logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
            )
        root_logger.addHandler(console_handler)

    if file_logging:
        log_dir = Path(log_dir) if log_dir is not None else Path("./logs")
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / log_file_name(log_prefix)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

    return root_logger


def current_log_file() -> Optional[Path]:
    """Path of the active log file, or None when only console logging is on."""
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def get_logger(name: str) -> logging.Logger:
    """
    Get a child of the ``prescribing`` logger.

    Usage:
        from core.logging_config import get_logger
        logger = get_logger(__name__)
        logger.info("Loading extracts")
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
