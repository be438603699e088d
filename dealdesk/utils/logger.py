"""Logging configuration for DealDesk"""

import logging
import os
from typing import Optional

LOGGER_PREFIX = "dealdesk"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _resolve_level(log_level: Optional[str]) -> int:
    """Level name -> logging constant; unknown names fall back to INFO."""
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")
    level = getattr(logging, str(log_level).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str, log_level: Optional[str] = None) -> logging.Logger:
    """
    Create a console logger for a module.

    Args:
        name: Logger name (usually __name__)
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            LOG_LEVEL from the environment if None

    Returns:
        Configured logger instance
    """
    level = _resolve_level(log_level)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # One console handler per logger
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get or create a logger instance."""
    return setup_logger(name)


def set_log_level(log_level: str, prefix: str = LOGGER_PREFIX) -> int:
    """
    Apply a level to every logger already created under `prefix`.

    Module loggers are built at import time, before settings are loaded,
    so the configured level is pushed onto them afterwards.

    Returns:
        The numeric level applied
    """
    level = _resolve_level(log_level)
    for name in list(logging.root.manager.loggerDict):
        if name != prefix and not name.startswith(prefix + "."):
            continue
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    return level
