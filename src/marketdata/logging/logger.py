"""Logging setup for the market-data package."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_HANDLER_NAME = "marketdata.console"


def setup_logger(log_level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure and return the ``marketdata`` logger.

    Records go to stderr so rendered series on stdout stay clean, plus a file
    when ``log_file`` is set. Calling again updates the level on the existing
    handlers and adds a file handler at most once per path.
    """
    level = logging.getLevelNamesMapping().get(log_level.strip().upper(), logging.INFO)
    logger = logging.getLogger("marketdata")
    logger.setLevel(level)
    logger.propagate = False
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if not any(handler.get_name() == CONSOLE_HANDLER_NAME for handler in logger.handlers):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        path = os.path.abspath(log_file)
        open_files = {
            handler.baseFilename
            for handler in logger.handlers
            if isinstance(handler, logging.FileHandler)
        }
        if path not in open_files:
            file_handler = logging.FileHandler(path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(level)
    return logger
