"""Development stubs for the tallying engine ports."""

from sealed_tally.infrastructure.stubs.ballot_ledger_stub import BallotLedgerStub
from sealed_tally.infrastructure.stubs.ciphertext_capability_stub import (
    CiphertextCapabilityStub,
    EncryptedInput,
)
from sealed_tally.infrastructure.stubs.tally_event_emitter_stub import (
    EmittedEvent,
    TallyEventEmitterStub,
)
from sealed_tally.infrastructure.stubs.time_authority_stub import TimeAuthorityStub

__all__ = [
    "BallotLedgerStub",
    "CiphertextCapabilityStub",
    "EmittedEvent",
    "EncryptedInput",
    "TallyEventEmitterStub",
    "TimeAuthorityStub",
]
