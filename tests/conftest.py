"""
Pytest configuration and shared fixtures for Sealed Tally tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Time-dependent tests use the `clock` fixture, never the system clock
"""

from collections.abc import Awaitable, Callable
from datetime import timedelta

import pytest

from sealed_tally.bootstrap import BallotEngine, build_engine
from sealed_tally.config import TallyConfig
from sealed_tally.domain.models.tally import VoteReceipt
from sealed_tally.infrastructure.stubs import (
    BallotLedgerStub,
    CiphertextCapabilityStub,
    TallyEventEmitterStub,
    TimeAuthorityStub,
)

AUTHORITY = "authority"
REVEALER = "tally-revealer"

# Proposal opens this long after creation in the shared fixtures
START_DELAY = timedelta(seconds=60)
DURATION_SECONDS = 3600


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from sealed_tally import __version__

    return __version__


@pytest.fixture
def config() -> TallyConfig:
    """Provide an engine configuration with fixed principals."""
    return TallyConfig(authority_id=AUTHORITY, revealer_id=REVEALER)


@pytest.fixture
def clock() -> TimeAuthorityStub:
    """Provide a frozen clock at 2026-01-01T00:00:00Z."""
    return TimeAuthorityStub()


@pytest.fixture
def capability() -> CiphertextCapabilityStub:
    """Provide a mock ciphertext backend that enforces the ballot domain."""
    return CiphertextCapabilityStub(secret_key=b"k" * 32)


@pytest.fixture
def ledger() -> BallotLedgerStub:
    return BallotLedgerStub()


@pytest.fixture
def emitter() -> TallyEventEmitterStub:
    return TallyEventEmitterStub()


@pytest.fixture
def engine(
    config: TallyConfig,
    ledger: BallotLedgerStub,
    capability: CiphertextCapabilityStub,
    emitter: TallyEventEmitterStub,
    clock: TimeAuthorityStub,
) -> BallotEngine:
    """Provide services wired to the shared stubs."""
    return build_engine(
        config,
        ledger=ledger,
        capability=capability,
        event_emitter=emitter,
        time_authority=clock,
    )


@pytest.fixture
async def open_proposal(engine: BallotEngine, clock: TimeAuthorityStub) -> int:
    """Create a proposal and advance the clock into its voting window."""
    proposal_id = await engine.registry.create_proposal(
        caller=AUTHORITY,
        title="Adopt the new policy",
        description="Yes adopts, no keeps the current policy",
        start_time=clock.now() + START_DELAY,
        duration_seconds=DURATION_SECONDS,
    )
    clock.advance(START_DELAY + timedelta(seconds=1))
    return proposal_id


@pytest.fixture
def cast(
    engine: BallotEngine,
    capability: CiphertextCapabilityStub,
) -> Callable[[int, str, int], Awaitable[VoteReceipt]]:
    """Provide a helper that encrypts a plaintext choice and casts it."""

    async def _cast(proposal_id: int, voter_id: str, value: int) -> VoteReceipt:
        ballot = capability.encrypt_input(value)
        return await engine.accumulator.cast_vote(
            proposal_id=proposal_id,
            voter_id=voter_id,
            encrypted_choice=ballot.ciphertext,
            validity_proof=ballot.proof,
        )

    return _cast


@pytest.fixture
def end_window(clock: TimeAuthorityStub) -> Callable[[], None]:
    """Provide a helper that moves the clock past `open_proposal`'s window."""

    def _end() -> None:
        clock.advance(seconds=DURATION_SECONDS)

    return _end


@pytest.fixture
def authority_id(config: TallyConfig) -> str:
    return config.authority_id


@pytest.fixture
def revealer_id(config: TallyConfig) -> str:
    return config.revealer_id
