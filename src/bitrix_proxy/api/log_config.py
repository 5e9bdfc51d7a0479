"""Logging setup shared by the server and the CLI."""

import logging
import os

import structlog

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level_name: str | None = None) -> int:
    """Configure stdlib logging and structlog with the same level.

    Args:
        level_name: Level name; defaults to the ``LOGLEVEL`` environment variable

    Returns:
        The numeric log level applied
    """
    level_name = (level_name or os.getenv("LOGLEVEL", "INFO")).upper()
    log_level = LOG_LEVEL_MAP.get(level_name, logging.INFO)
    logging.basicConfig(level=log_level, format="%(message)s")
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
    return log_level
