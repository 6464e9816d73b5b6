from __future__ import annotations

import logging
import sys
from typing import TextIO

from ..models.attendance_summary import AttendanceSummary
from ..services.summary import render_summary_body

"""Labeled console logging for attendance runs.

Every line is `LABEL message`, LABEL being INFO|WARN|ERROR|SUMMARY (DEBUG
with --debug). One handler sits on the package logger `attendance_tracker`;
module loggers from logging.getLogger(__name__) inside the package reach it
without configuring anything themselves.

Two helpers carry the run's fixed line shapes:
- log_failure: `ERROR <operation>: <message>` for load/mark/save/config errors
- log_summary: `SUMMARY date=... students=... present=... absent=... rate=...`
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_failure",
    "log_summary",
    "set_debug",
    "reset_logging",
]

LOGGER_NAME = "attendance_tracker"

# between INFO=20 and WARNING=30 so --debug never hides it
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """`LABEL message` lines; WARNING is shortened to WARN."""

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
        return f"{label} {record.getMessage()}"


def setup_logging(debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Configure the package logger once per process.

    Args:
        debug: start at DEBUG instead of INFO
        stream: where lines go (stdout by default, the CLI output contract)

    Returns:
        The package logger. Later calls return it unchanged; use set_debug to
        change the level afterwards.
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # the root logger may have its own handlers (pytest, host apps)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_failure(operation: str, error: Exception) -> None:
    """Log a failed engine operation as `ERROR <operation>: <message>`."""
    get_logger().error(f"{operation}: {error}")


def log_summary(summary: AttendanceSummary | str) -> None:
    """Log the run summary at SUMMARY level (the formatter adds the label)."""
    message = render_summary_body(summary) if isinstance(summary, AttendanceSummary) else summary
    get_logger().log(SUMMARY_LEVEL, message)


def set_debug(enabled: bool = True) -> None:
    logger = get_logger()
    level = logging.DEBUG if enabled else logging.INFO
    for handler in logger.handlers:
        handler.setLevel(level)
    logger.setLevel(level)


def reset_logging() -> None:
    """Drop the configured handler so the next setup_logging starts over (tests)."""
    global _logger
    if _logger is not None:
        for handler in _logger.handlers[:]:
            _logger.removeHandler(handler)
    _logger = None
