"""
Structured logging configuration using structlog.
"""

import logging
import sys
from typing import Any

import structlog
from src.config import settings


def configure_logging() -> None:
    """
    Configure structured logging for the hang tag service.

    Development gets a pretty console renderer, every other environment
    emits one JSON object per line so batch failures can be grepped by
    product identifier.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper())
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer()
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.error("Hang tag render failed", extra={"identifier": "DCD771C2"})
    """
    return structlog.get_logger(name)


configure_logging()
