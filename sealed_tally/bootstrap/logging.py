"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from sealed_tally.config import TallyConfig
from sealed_tally.infrastructure.observability import (
    configure_structlog as _configure_structlog,
)


def configure_logging(
    config: TallyConfig,
    *,
    log_level: str | None = None,
    cache_loggers: bool = True,
) -> None:
    """Configure structlog for the configured environment."""
    _configure_structlog(
        environment=config.environment,
        log_level=log_level,
        cache_loggers=cache_loggers,
    )


__all__ = ["configure_logging"]
