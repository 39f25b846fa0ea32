"""Tally event emitter stub for testing.

Stores emitted events in memory with their sequence numbers so tests
can assert on the audit trail.

WARNING: This is a development stub. Not for production use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from structlog import get_logger

from sealed_tally.domain.events import TallyEvent

# DEV_MODE_WATERMARK per dev stub convention
DEV_MODE_WATERMARK: str = "DEV_STUB:TallyEventEmitterStub:v1"

logger = get_logger(__name__)


@dataclass(frozen=True)
class EmittedEvent:
    """Record of one emitted event."""

    sequence: int
    event_type: str
    payload: dict[str, Any]
    event: TallyEvent


class TallyEventEmitterStub:
    """In-memory implementation of TallyEventEmitterPort."""

    def __init__(self) -> None:
        self.emitted_events: list[EmittedEvent] = []

    async def emit(self, event: TallyEvent) -> int:
        sequence = len(self.emitted_events) + 1
        self.emitted_events.append(
            EmittedEvent(
                sequence=sequence,
                event_type=event.event_type,
                payload=event.to_dict(),
                event=event,
            )
        )
        logger.debug(
            "tally_event_emitted",
            sequence=sequence,
            event_type=event.event_type,
            watermark=DEV_MODE_WATERMARK,
        )
        return sequence

    def event_types(self) -> list[str]:
        """Return emitted event types in order."""
        return [emitted.event_type for emitted in self.emitted_events]

    def events_of_type(self, event_type: str) -> list[TallyEvent]:
        return [e.event for e in self.emitted_events if e.event_type == event_type]

    def reset(self) -> None:
        """Clear all recorded events."""
        self.emitted_events.clear()
