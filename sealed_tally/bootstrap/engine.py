"""Bootstrap wiring for the tallying engine.

Builds the four services around one shared ledger, ciphertext backend,
event emitter and clock. Collaborators not supplied fall back to the
in-memory development stubs and the system clock.
"""

from __future__ import annotations

from dataclasses import dataclass

from sealed_tally.application.ports.ballot_ledger import BallotLedgerProtocol
from sealed_tally.application.ports.ciphertext_capability import (
    CiphertextCapabilityProtocol,
)
from sealed_tally.application.ports.tally_event_emitter import TallyEventEmitterPort
from sealed_tally.application.ports.time_authority import TimeAuthorityProtocol
from sealed_tally.application.services import (
    AccessControlService,
    BallotAccumulatorService,
    ProposalRegistryService,
    TallyRevealerService,
    TimeAuthorityService,
)
from sealed_tally.config import TallyConfig
from sealed_tally.infrastructure.stubs import (
    BallotLedgerStub,
    CiphertextCapabilityStub,
    TallyEventEmitterStub,
)


@dataclass(frozen=True)
class BallotEngine:
    """The wired services plus the collaborators they share."""

    config: TallyConfig
    registry: ProposalRegistryService
    accumulator: BallotAccumulatorService
    revealer: TallyRevealerService
    access_control: AccessControlService
    ledger: BallotLedgerProtocol
    capability: CiphertextCapabilityProtocol
    event_emitter: TallyEventEmitterPort
    time_authority: TimeAuthorityProtocol


def build_engine(
    config: TallyConfig,
    *,
    ledger: BallotLedgerProtocol | None = None,
    capability: CiphertextCapabilityProtocol | None = None,
    event_emitter: TallyEventEmitterPort | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
) -> BallotEngine:
    """Wire a BallotEngine for `config`."""
    if ledger is None:
        ledger = BallotLedgerStub()
    if capability is None:
        capability = CiphertextCapabilityStub(secret_key=config.stub_key)
    if event_emitter is None:
        event_emitter = TallyEventEmitterStub()
    if time_authority is None:
        time_authority = TimeAuthorityService()

    access_control = AccessControlService(
        authority_id=config.authority_id,
        capability=capability,
        revealer_id=config.revealer_id,
    )
    shared = {
        "ledger": ledger,
        "capability": capability,
        "access_control": access_control,
        "event_emitter": event_emitter,
        "time_authority": time_authority,
    }
    return BallotEngine(
        config=config,
        registry=ProposalRegistryService(**shared),
        accumulator=BallotAccumulatorService(**shared),
        revealer=TallyRevealerService(**shared),
        access_control=access_control,
        ledger=ledger,
        capability=capability,
        event_emitter=event_emitter,
        time_authority=time_authority,
    )


__all__ = ["BallotEngine", "build_engine"]
