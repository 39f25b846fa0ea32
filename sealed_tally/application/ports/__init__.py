"""Application ports (abstract interfaces) for Sealed Tally.

Infrastructure adapters and stubs implement these interfaces; services
depend only on them.
"""

from sealed_tally.application.ports.ballot_ledger import BallotLedgerProtocol
from sealed_tally.application.ports.ciphertext_capability import (
    CiphertextCapabilityProtocol,
)
from sealed_tally.application.ports.tally_event_emitter import TallyEventEmitterPort
from sealed_tally.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "BallotLedgerProtocol",
    "CiphertextCapabilityProtocol",
    "TallyEventEmitterPort",
    "TimeAuthorityProtocol",
]
