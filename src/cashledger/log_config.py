"""Logging setup for the cashledger command line."""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "CASHLEDGER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


class PlainTextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = f"[{record.levelname}] {record.name} {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def resolve_log_level(level: Optional[str] = None) -> int:
    """Turn a level name (or the environment default) into a logging level.

    Unknown names fall back to WARNING.
    """
    name = (level or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger with one plain-text stderr handler.

    Safe to call repeatedly; each call replaces the handler so it writes to
    the current stderr.
    """
    logger = logging.getLogger("cashledger")
    logger.setLevel(resolve_log_level(level))
    for old_handler in list(logger.handlers):
        logger.removeHandler(old_handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(PlainTextFormatter())
    logger.addHandler(handler)
    return logger
