"""Logging utilities for Idea Validator.

Everything goes through loguru. Records from the standard library loggers
used by uvicorn and SQLAlchemy are forwarded into it, so the API server and
the storage layer end up in the same sinks as our own messages.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import get_config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy")


class InterceptHandler(logging.Handler):
    """Hand standard library log records over to loguru."""

    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging internals so the caller shows up as the origin
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def forward_std_logging(log_level: str):
    """Route uvicorn and SQLAlchemy loggers into loguru."""
    handler = InterceptHandler()
    for name in FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False
    # SQLAlchemy echoes every statement at INFO, keep it quiet unless debugging
    logging.getLogger("sqlalchemy").setLevel(
        logging.DEBUG if log_level.upper() == "DEBUG" else logging.WARNING
    )


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
):
    """Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file, empty string disables the file sink
        log_format: "text" or "json"; json writes one serialized record per
            line to the log file
    """
    config = get_config()

    logger.remove()

    if log_level is None:
        log_level = config.logging.level
    if log_format is None:
        log_format = config.logging.format

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)

    if log_file is None:
        log_file = config.logging.file

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=log_level,
            serialize=log_format == "json",
            rotation=config.logging.rotation,
            retention=config.logging.retention,
            compression="zip",
        )

    forward_std_logging(log_level)

    logger.info(f"Logging initialized at {log_level} level ({log_format})")
