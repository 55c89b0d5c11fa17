"""Logging configuration using loguru.

Diagnostics only: status lines meant for the user go through the I/O
collaborator.  Stdlib logging is bridged into loguru so that everything ends
up in one sink.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from loguru import logger

_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
_DEBUG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the caller, not the logging module
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", *, sink: TextIO | None = None) -> None:
    """Point loguru at ``sink`` (stderr by default) and intercept stdlib logging.

    Call once per invocation, before discovery runs.  At ``DEBUG`` each line
    carries a timestamp and the call site.
    """
    level = level.upper()
    stream = sink or sys.stderr

    logger.remove()
    logger.add(
        stream,
        level=level,
        format=_DEBUG_FORMAT if level == "DEBUG" else _FORMAT,
        colorize=stream.isatty(),
    )
    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug("Logging initialised (level={})", level)
