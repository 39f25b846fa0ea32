"""Structlog configuration for the tallying engine.

Production renders one JSON object per line; development renders
coloured console output. The level comes from `LOG_LEVEL` (default INFO).

Usage:
    from sealed_tally.infrastructure.observability import configure_structlog

    configure_structlog(environment="development")
"""

from __future__ import annotations

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from sealed_tally.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level(override: str | None = None) -> int:
    level_name = (override or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(
    environment: str = "production",
    *,
    log_level: str | None = None,
    cache_loggers: bool = True,
) -> None:
    """Configure structlog once at process start.

    Args:
        environment: 'production' for JSON output, anything else for console.
        log_level: Overrides `LOG_LEVEL` when given.
        cache_loggers: Pass False when stdout may be swapped between runs,
            as in CLI invocations under a test runner.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=cache_loggers,
    )
