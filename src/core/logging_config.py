"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Events go to stderr so stdout stays reserved for decoded records.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL, SUPPORTED_LOG_LEVELS


def configure_logging(level: str) -> None:
    """Configure structlog processors and level filtering.

    Args:
        level: Level name, one of ``SUPPORTED_LOG_LEVELS``.
    """
    level_name = level.lower() if level.lower() in SUPPORTED_LOG_LEVELS else DEFAULT_LOG_LEVEL
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(_StderrWriter()),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    configure_logging(os.getenv("AVROREAD_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    return structlog.get_logger(name)


class _StderrWriter:
    """File-like target that resolves ``sys.stderr`` on every write."""

    def write(self, message: str) -> int:
        return sys.stderr.write(message)

    def flush(self) -> None:
        sys.stderr.flush()
