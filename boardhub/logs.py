"""Application logging: a coloured caller-aware formatter and shared loggers."""

from __future__ import annotations

import logging
import os
import sys
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LOGGER_NAME = "boardhub"
_LOG_FILE = "info.log"
_LEVEL_PAD = 7

_LEVEL_TEXT = {
    TRACE: "TRACE",
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARNING",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_LEVEL_COLOR = {
    TRACE: 37,
    logging.DEBUG: 37,
    logging.INFO: 36,
    logging.WARNING: 33,
    logging.ERROR: 31,
    logging.CRITICAL: 31,
}


class LogLevel(str, Enum):
    """Level names accepted in the LOG_LEVEL setting."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def level(self) -> int:
        return _NAME_TO_LEVEL[self]


_NAME_TO_LEVEL = {
    LogLevel.TRACE: TRACE,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def level_from_name(name: str | None) -> int:
    """Map a level name to a logging level; unknown or missing names mean debug."""
    try:
        return LogLevel(name).level
    except ValueError:
        return logging.DEBUG


class CallerFormatter(logging.Formatter):
    """Formats records as coloured, padded level, timestamp, caller and message."""

    TIMESTAMP_FORMAT = "%d-%m-%Y %H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        level_text = _LEVEL_TEXT.get(record.levelno, record.levelname).ljust(_LEVEL_PAD)
        color = _LEVEL_COLOR.get(record.levelno, 36)
        stamp = datetime.fromtimestamp(record.created).strftime(self.TIMESTAMP_FORMAT)
        stamp = f"{stamp}.{int(record.msecs):03d}"
        caller = f"{record.funcName}() [{os.path.basename(record.pathname)}:{record.lineno}]"
        text = f"\x1b[{color}m{level_text}\x1b[0m[{stamp}]{caller} {record.getMessage()}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def init_logger(log_dir: str | os.PathLike = "logs", level_name: str | None = None) -> logging.Logger:
    """Configure the application logger to write to a log file and to stdout."""
    directory = Path(log_dir)
    directory.mkdir(mode=0o744, parents=True, exist_ok=True)

    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    handlers: list[logging.Handler] = []
    try:
        handlers.append(logging.FileHandler(directory / _LOG_FILE, mode="a", encoding="utf-8"))
    except OSError:
        pass
    handlers.append(logging.StreamHandler(sys.stdout))

    formatter = CallerFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if level_name is None:
        level_name = os.environ.get("LOG_LEVEL")
    logger.setLevel(level_from_name(level_name))
    return logger


_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def get_logger() -> logging.Logger:
    """Return the application logger, configuring it on first use."""
    global _logger
    with _logger_lock:
        if _logger is None:
            _logger = init_logger()
        return _logger


_nop_logger = logging.Logger(f"{_LOGGER_NAME}.nop")
_nop_logger.addHandler(logging.NullHandler())
_nop_logger.propagate = False
_nop_logger.disabled = True


def get_nop_logger() -> logging.Logger:
    """Return a logger that discards everything."""
    return _nop_logger