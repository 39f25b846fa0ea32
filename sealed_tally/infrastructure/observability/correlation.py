"""Correlation id tracking for request-scoped logging.

A contextvar holds the id for the current request so it survives await
points. The API middleware sets it from the `X-Correlation-ID` header or
mints a fresh one; the structlog processor stamps it on every entry.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a new UUID4 string."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the current correlation id, or "" outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding `correlation_id` when one is set."""
    correlation_id = _correlation_id.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict
