"""Logging configuration for sitesched entry points."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger.

    Library modules only create loggers; handlers are installed here by
    whichever entry point runs the engine.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        log_file: Optional file that receives the same records

    Returns:
        The configured "sitesched" logger
    """
    logger = logging.getLogger("sitesched")
    logger.setLevel(level.upper())

    formatter = logging.Formatter(LOG_FORMAT)

    # Replace handlers from a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
