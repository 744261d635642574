from __future__ import annotations

import logging
import sys
from typing import TextIO

from tqdm import tqdm

"""Logging initialization with labeled prefixes.

All output goes to stdout as `LABEL message` lines (INFO|WARN|ERROR|SUMMARY).
Modules log through `logging.getLogger(__name__)`; being children of the
`weather_harvest` logger they share its handler.

Lines are printed through tqdm.write, so a `month=.. records=..` line logged
while the month progress bar is on screen lands above the bar instead of
tearing it.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "ProgressAwareHandler",
    "setup_logging",
    "get_logger",
    "log_summary",
    "set_debug",
    "reset_logging",
]

LOGGER_NAME = "weather_harvest"

# between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """`LABEL message`, with WARNING shortened to WARN."""

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


class ProgressAwareHandler(logging.StreamHandler):
    """Stream handler that writes through tqdm.write.

    tqdm clears its bars, prints the line and redraws them. Without an active
    bar (non-TTY runs) this is a plain write to the stream.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(stream if stream is not None else sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logging() -> logging.Logger:
    """Configure the `weather_harvest` logger once per process.

    Later calls return the configured logger untouched. The stream is bound to
    the sys.stdout of the first call; reset_logging() forces a rebind.

    Returns:
        The application logger
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = ProgressAwareHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # root handlers would print every line twice
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def set_debug(logger: logging.Logger) -> None:
    """Let DEBUG lines (skipped days, sheet extents, rows written) through."""
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Log `message` at SUMMARY level; the label is added by the formatter."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() rebinds stdout."""
    global _logger
    _logger = None
