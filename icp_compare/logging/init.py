from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

"""Logging for the icp-compare CLI.

Lines on stdout read ``LABEL message`` with labels INFO | WARN | ERROR |
SUMMARY (level 25). A comparison ends with exactly one SUMMARY line made of
``key=value`` fields, or with one ERROR line carrying the user-facing message.

Diagnostics (raw parser errors, server bodies) are logged at DEBUG with
``exc_info``; their tracebacks appear only after ``--debug``.
"""

__all__ = [
    "setup_logging",
    "enable_debug",
    "get_logger",
    "format_fields",
    "log_summary",
    "reset_logging",
    "LabeledFormatter",
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
]

LOGGER_NAME = "icp_compare"
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message``; DEBUG records also carry their traceback."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        line = f"{label} {record.getMessage()}"
        # ERROR 行はユーザー向けの1行のみ; トレースバックは DEBUG のときだけ
        if record.exc_info and record.levelno == logging.DEBUG:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure the ``icp_compare`` logger once and return it.

    Module loggers (``icp_compare.excel.reader`` ...) propagate into it and
    share the stdout handler; nothing reaches the root logger.
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return logger


def enable_debug() -> logging.Logger:
    """Lower the logger and its handlers to DEBUG (``--debug``)."""
    logger = get_logger()
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)
    logger.debug("debug mode enabled")
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def format_fields(fields: Mapping[str, object]) -> str:
    """Join fields as ``key=value`` in insertion order.

    >>> format_fields({"sheet": "Q1-Targets", "matched": 1})
    'sheet=Q1-Targets matched=1'
    """
    return " ".join(f"{key}={value}" for key, value in fields.items())


def log_summary(message: str | Mapping[str, object]) -> None:
    """Log at SUMMARY level; a mapping is rendered with ``format_fields``."""
    if isinstance(message, Mapping):
        message = format_fields(message)
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger (tests)."""
    global _logger
    _logger = None
