"""Logging configuration for SeriesDiff.

This module provides centralized logging configuration for the package.
Logs go to stderr (and optionally a file) so they never interleave with the
report printed on stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

# Default log level
DEFAULT_LEVEL = logging.WARNING

# Log format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "seriesdiff"


def configure_logging(
    level: Union[int, str] = DEFAULT_LEVEL,
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """Configure logging for SeriesDiff.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        log_file: Optional path to log file. If None, only console logging is enabled.
        console: Whether to log to stderr (default: True)

    Example:
        # Debug output while investigating a flaky backend
        configure_logging(level="DEBUG")

        # Keep a log of the run next to the report
        configure_logging(level=logging.INFO, log_file=Path("seriesdiff.log"))
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), DEFAULT_LEVEL)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger (avoid duplicate logs)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Name of the module (e.g., "seriesdiff.load.generator")

    Returns:
        Logger instance

    Example:
        logger = get_logger(__name__)
        logger.debug("Issued %d requests", count)
    """
    return logging.getLogger(name)


# Configure default logging on module import
configure_logging()
