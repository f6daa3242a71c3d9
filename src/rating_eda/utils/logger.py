"""Logging utilities."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger writing to stderr with the package format.
    
    Handlers are attached once per logger name, so repeated calls from
    the same module return the same configured logger.
    
    Args:
        name: Logger name (usually ``__name__``)
        level: Optional logging level name (e.g. "INFO", "DEBUG")
    
    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        if level is None:
            logger.setLevel(logging.INFO)
    
    if level is not None:
        logger.setLevel(level.upper())
    
    return logger


def set_log_level(level: str) -> None:
    """Set the level on every logger created under the ``rating_eda`` package."""
    for name in list(logging.root.manager.loggerDict):
        if name == "rating_eda" or name.startswith("rating_eda."):
            logging.getLogger(name).setLevel(level.upper())
