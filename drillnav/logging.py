"""Logger of the drillnav package."""

from __future__ import annotations

import os
from logging import FileHandler, Formatter, Logger, StreamHandler, getLogger

__all__ = ["get_logger", "create_logger"]

DEFAULT_LOGGER_NAME = "drillnav"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOGGING_PATH_VARIABLE = "DRILLNAV_LOGGING_PATH"

logger: Logger | None = None


def get_logger(path: str | None = None) -> Logger:
    """Get the default drillnav logger, creating it on first use."""
    global logger

    if logger:
        return logger
    return create_logger(path)


def create_logger(path: str | None = None) -> Logger:
    """Create the default drillnav logger. Records go to `path` when given
    (or to the file named by ``DRILLNAV_LOGGING_PATH``), otherwise to
    standard error."""
    global logger

    logger = getLogger(DEFAULT_LOGGER_NAME)
    logger.propagate = False

    if not logger.handlers:
        path = path or os.environ.get(LOGGING_PATH_VARIABLE)
        if path:
            handler = FileHandler(path)
        else:
            handler = StreamHandler()

        handler.setFormatter(Formatter(fmt=DEFAULT_FORMAT))
        logger.addHandler(handler)

    return logger
