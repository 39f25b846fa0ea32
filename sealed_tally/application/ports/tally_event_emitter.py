"""Tally event emitter port.

Publishes engine notifications (proposal created, vote cast, results
revealed, proposal closed) to downstream observers in commit order.
"""

from __future__ import annotations

from typing import Protocol

from sealed_tally.domain.events import TallyEvent


class TallyEventEmitterPort(Protocol):
    """Protocol for tally event emission.

    Implementations must preserve call order: observers replay these
    events as an audit trail.

    Example:
        emitter = TallyEventEmitterStub()
        await emitter.emit(ProposalCreatedEvent(...))
    """

    async def emit(self, event: TallyEvent) -> int:
        """Publish an event.

        Args:
            event: Any tally event payload.

        Returns:
            Sequence number assigned to the event (1-based, gap-free).

        Callers emit after the change is committed. An exception raised here
        is logged by the caller and does not undo the change.
        """
        ...
