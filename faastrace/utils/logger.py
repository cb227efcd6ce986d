"""Logging helpers."""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PACKAGE_LOGGER = "faastrace"


def setup_logger(name: str, level: Union[str, int] = "INFO",
                 verbose: bool = False) -> logging.Logger:
    """Create (or fetch) a named logger with a single stream handler.

    Loggers under ``faastrace.`` are left unconfigured and inherit level and
    handler from the ``faastrace`` logger, so one call on the package logger
    controls every component.

    Args:
        name: Logger name, usually ``faastrace.`` plus the caller's class name
        level: Log level name or number
        verbose: Force DEBUG level

    Returns:
        Configured logger
    """
    if name.startswith(PACKAGE_LOGGER + "."):
        if not logging.getLogger(PACKAGE_LOGGER).handlers:
            setup_logger(PACKAGE_LOGGER)
        return logging.getLogger(name)

    logger = logging.getLogger(name)

    if verbose:
        level = logging.DEBUG
    elif isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
