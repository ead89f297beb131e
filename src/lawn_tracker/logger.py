"""
Logging configuration for the lawn tracker.

The CLI prints its results as JSON on stdout, so console logging always goes
to stderr. A detailed log file is kept alongside unless disabled.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Tuple, Type
from datetime import datetime

DEFAULT_LOG_FILE = "logs/lawn_tracker.log"

CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: Optional[str], default: int) -> int:
    if not name:
        return default
    return getattr(logging, str(name).upper(), default)


def setup_logger(
    name: str = "lawn_tracker",
    log_file: Optional[str] = None,
    log_level: str = "INFO",
    console_level: Optional[str] = None
) -> logging.Logger:
    """
    Set up the application logger.

    Args:
        name: Logger name
        log_file: Path to log file. If None, uses LOG_FILE env var or the
            default; an empty string disables the file handler
        log_level: Overall logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_level: Level for stderr output (defaults to log_level)

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = os.getenv("LOG_FILE", DEFAULT_LOG_FILE)

    level = _level(log_level, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_level(console_level, level))
    console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


class LoggerContext:
    """
    Context manager timing one operation (weather fetch, report import, ...).

    Exceptions listed in ``expected`` are logged as warnings without a
    traceback; anything else is logged as an error with one. Exceptions are
    never suppressed.
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        expected: Tuple[Type[BaseException], ...] = ()
    ):
        """
        Initialize logger context.

        Args:
            logger: Logger instance
            operation: Name of the operation being logged
            expected: Exception types that are handled by the caller
        """
        self.logger = logger
        self.operation = operation
        self.expected = expected
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {self.duration:.2f}s")
        elif self.expected and issubclass(exc_type, self.expected):
            self.logger.warning(f"{self.operation} failed after {self.duration:.2f}s: {exc_val}")
        else:
            self.logger.error(
                f"Failed {self.operation} after {self.duration:.2f}s: {exc_val}",
                exc_info=True
            )
        return False
