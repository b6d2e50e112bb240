"""
Logging infrastructure setup.

The library itself only creates module loggers; applications embedding it
call ``setup_logger`` once to get colored console output.
"""

import logging
import os
from typing import Optional

import coloredlogs  # type: ignore

# Get logger for this module
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

LEVEL_STYLES = {
    "debug": {"color": "cyan"},
    "info": {"color": "green"},
    "warning": {"color": "yellow"},
    "error": {"color": "red"},
    "critical": {"color": "red", "bold": True},
}

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(level_name: Optional[str] = None) -> int:
    """
    Resolve a logging level name.

    Args:
        level_name: Level name; read from the LOG_LEVEL environment
            variable when omitted

    Returns:
        The logging level (defaults to logging.INFO if not set or invalid)
    """
    if level_name is None:
        level_name = os.getenv("LOG_LEVEL", "INFO")
    return _LEVELS.get(level_name.strip().upper(), logging.INFO)


def setup_logger(level_name: Optional[str] = None) -> int:
    """Install colored console logging and return the level in effect."""
    log_level = get_log_level(level_name)
    coloredlogs.install(level=log_level, fmt=LOG_FORMAT, level_styles=LEVEL_STYLES)
    logger.info("log level: %s", logging.getLevelName(log_level))
    return log_level
