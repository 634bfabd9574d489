"""
Logging infrastructure.

Provides logging utilities for the toy store packages.
"""
import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get logger instance.

    Args:
        name: Logger name (usually module name)
        level: Level name; defaults to the configured log level

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        if level is None:
            from toystore.infrastructure.database.config import get_settings
            level = get_settings().log_level
        logger.setLevel(level.upper())
    return logger


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach the standard handler to the package root logger.

    init_database / init_database_async call this; applications that skip
    them call it once at startup. Module loggers propagate to it.
    """
    return get_logger("toystore", level)
