"""
Logging setup for the inventory service.

LOG_LEVEL: 0 silent, 1 INFO (default), 2 DEBUG
LOG_FILE:  optional file path; stderr when unset or not writable
"""
import logging
import os
import sys
from typing import Optional

LOGGER_NAME = "inventory"


def setup_logger(level: Optional[int] = None, log_file: Optional[str] = None) -> logging.Logger:
    if level is None:
        try:
            level = int(os.environ.get("LOG_LEVEL", "1"))
        except ValueError:
            level = 1
    if log_file is None:
        log_file = os.environ.get("LOG_FILE")

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False

    if level == 1:
        logger.setLevel(logging.INFO)
    elif level >= 2:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.CRITICAL + 1)

    # Idempotent across app factories and reloads
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = None
    if log_file and level > 0:
        try:
            handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError:
            handler = logging.StreamHandler(sys.stderr)
    elif level > 0:
        handler = logging.StreamHandler(sys.stderr)

    if handler:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
