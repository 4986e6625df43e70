"""
Logging for Chronoline.

Every engine logger hangs off the ``chronoline`` logger, so one call to
``setup_logging`` configures the whole library. Nothing is configured at
import time; an application embedding the engine decides where logs go.

Records may carry a ``session_id`` extra. The formatter appends it so lines
from concurrent games can be told apart.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Mapping, TextIO

ROOT_LOGGER_NAME = "chronoline"

LevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


# ============================================================================
# Formatter
# ============================================================================


class ChronolineFormatter(logging.Formatter):
    """``[time] LEVEL component: message (session ...)``, coloured on terminals."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2;36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[1;31m",
        logging.CRITICAL: "\033[1;35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = False, include_timestamp: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.include_timestamp = include_timestamp

    @staticmethod
    def component(logger_name: str) -> str:
        """Logger name without the package prefix: ``chronoline.engine.ai`` -> ``engine.ai``."""
        prefix = f"{ROOT_LOGGER_NAME}."
        return logger_name[len(prefix):] if logger_name.startswith(prefix) else logger_name

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<7}"
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        line = f"{level} {self.component(record.name)}: {record.getMessage()}"
        if self.include_timestamp:
            stamp = datetime.fromtimestamp(record.created, UTC).strftime("%H:%M:%S")
            line = f"[{stamp}] {line}"

        session_id = getattr(record, "session_id", None)
        if session_id:
            line = f"{line} (session {session_id})"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# ============================================================================
# Setup
# ============================================================================


def _stream_handler(stream: TextIO, level: int) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ChronolineFormatter(use_colors=stream.isatty()))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(ChronolineFormatter(use_colors=False))
    return handler


def setup_logging(
    level: LevelName = "INFO",
    log_dir: str | Path | None = None,
    console_output: bool = True,
    file_output: bool = True,
    log_filename: str = "chronoline.log",
) -> logging.Logger:
    """Configure the ``chronoline`` logger and return it.

    Calling it again replaces the previous handlers.

    Args:
        level: Minimum level to emit
        log_dir: Directory for the log file; no file is written without it
        console_output: Log to stderr, leaving stdout to CLI output
        file_output: Log to ``log_dir / log_filename``
        log_filename: Name of the log file

    Usage:
        setup_logging(level="DEBUG", log_dir="./logs")
    """
    numeric_level = logging.getLevelName(level)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console_output:
        logger.addHandler(_stream_handler(sys.stderr, numeric_level))
    if file_output and log_dir is not None:
        logger.addHandler(_file_handler(Path(log_dir) / log_filename, numeric_level))

    logger.propagate = False
    return logger


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """Logger for one engine component, e.g. ``get_logger("engine.ai")``."""
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


# ============================================================================
# Helpers
# ============================================================================


def log_operation(
    logger: logging.Logger,
    operation: str,
    details: Mapping[str, Any] | None = None,
    level: int = logging.INFO,
    session_id: str | None = None,
) -> None:
    """Log ``operation: key=value, ...`` tagged with an optional session id."""
    message = operation
    if details:
        message = f"{operation}: " + ", ".join(f"{key}={value}" for key, value in details.items())
    logger.log(level, message, extra={"session_id": session_id})


def log_error(
    logger: logging.Logger,
    operation: str,
    error: BaseException,
    context: Mapping[str, Any] | None = None,
) -> None:
    """Log a failed operation with the exception type and any context."""
    message = f"{operation} failed: {type(error).__name__}: {error}"
    if context:
        message += " [" + ", ".join(f"{key}={value}" for key, value in context.items()) + "]"
    logger.error(message)
