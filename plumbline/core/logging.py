"""Structured logging setup."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(level: int | str = logging.INFO, json_output: bool | None = None) -> None:
    """Configure structlog for plumbline and its host application.

    Args:
        level: Minimum level, as a ``logging`` constant or its name.
        json_output: Force JSON (True) or console (False) rendering.
            Defaults to console on a TTY and JSON otherwise.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    if json_output is None:
        json_output = not sys.stdout.isatty()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
