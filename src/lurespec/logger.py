"""
Logging configuration for lurespec.

The package logger ``lurespec`` owns the only handler. Module loggers from
``get_logger`` are its children and propagate to it, so importing a module
never adds or replaces handlers.
"""
import logging
import sys
from typing import Optional

from .config import Config

PACKAGE_LOGGER = "lurespec"


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a logger with a stdout handler.

    Calling it again updates the level (and the format when given) of the
    existing handler instead of stacking a new one.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    level = level or Config.LOG_LEVEL
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    handler = next((h for h in logger.handlers if getattr(h, "_lurespec", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler._lurespec = True
        handler.setFormatter(logging.Formatter(format_string or Config.LOG_FORMAT))
        logger.addHandler(handler)
    elif format_string:
        handler.setFormatter(logging.Formatter(format_string))
    handler.setLevel(numeric_level)

    logger.propagate = False

    return logger


logger = setup_logger()


def get_logger(name: str) -> logging.Logger:
    """
    Get the logger for a module, as a child of the package logger.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance named ``lurespec.<module>``
    """
    if name == PACKAGE_LOGGER:
        return logger
    if name.startswith(PACKAGE_LOGGER + "."):
        name = name[len(PACKAGE_LOGGER) + 1:]
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
