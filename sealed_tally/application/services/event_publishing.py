"""Post-commit event publication.

Events describe state that is already committed to the ledger. A failing
emitter must not turn a committed operation into an error for the
caller, so failures are logged and the operation still succeeds.
"""

from __future__ import annotations

from typing import Any

from sealed_tally.application.ports.tally_event_emitter import TallyEventEmitterPort
from sealed_tally.domain.events import TallyEvent


async def emit_committed(
    emitter: TallyEventEmitterPort,
    event: TallyEvent,
    log: Any,
) -> bool:
    """Emit `event` for an already committed change.

    Returns:
        True if the emitter accepted the event, False if it raised.
    """
    try:
        await emitter.emit(event)
    except Exception as e:
        # Committed state stands; the notification is lost
        log.error(
            "Event emission failed after commit",
            event_type=event.event_type,
            error=str(e),
            error_type=type(e).__name__,
        )
        return False
    log.debug("Event emitted", event_type=event.event_type)
    return True


__all__ = ["emit_committed"]
