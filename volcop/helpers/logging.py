"""
Logging setup for Volcop.

Modules obtain their logger with get_logger(__name__); the CLI calls
setup_logging() once before any backup work starts.
"""

import logging
import sys
from typing import Optional, TextIO

from .constants import LOG_DATE_FORMAT, LOG_FORMAT

ROOT_LOGGER_NAME = "volcop"


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the volcop namespace."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the volcop logger with a single stream handler.

    Args:
        level: Log level name
        stream: Target stream (defaults to stderr)

    Returns:
        The configured volcop logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
