"""
Structured logging setup.

Console rendering in development, one JSON object per line otherwise.
Call configure_logging() once at startup; modules grab a logger with
get_logger(__name__).
"""
import logging
from typing import Any

import structlog

from movienight.core.config import settings


def add_app_context(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Tag every entry with the service name and environment."""
    event_dict["service"] = "movienight"
    event_dict["environment"] = settings.APP_ENV
    return event_dict


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog processors and the minimum level."""
    level_name = (level or settings.LOG_LEVEL).upper()
    level_number = logging.getLevelName(level_name)
    if not isinstance(level_number, int):
        raise ValueError(f"Unknown log level: {level_name}")
    if json_output is None:
        json_output = not settings.is_dev

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)
