"""Unit tests for ProposalRegistryService."""

from datetime import timedelta

import pytest

from sealed_tally.bootstrap import BallotEngine
from sealed_tally.domain.errors import (
    InvalidScheduleError,
    ProposalNotFoundError,
    UnauthorizedError,
)
from sealed_tally.domain.events import PROPOSAL_CREATED_EVENT_TYPE
from sealed_tally.domain.models.proposal import ProposalState
from sealed_tally.infrastructure.stubs import (
    BallotLedgerStub,
    CiphertextCapabilityStub,
    TallyEventEmitterStub,
    TimeAuthorityStub,
)


async def _create(engine: BallotEngine, clock: TimeAuthorityStub, caller: str, **kw):
    fields = {
        "title": "Adopt the new policy",
        "description": "",
        "start_time": clock.now() + timedelta(seconds=60),
        "duration_seconds": 3600,
    }
    fields.update(kw)
    return await engine.registry.create_proposal(caller=caller, **fields)


class TestCreateProposal:
    """Tests for create_proposal."""

    async def test_ids_are_sequential_from_zero(
        self, engine: BallotEngine, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        """Each proposal gets the next id, starting at 0."""
        first = await _create(engine, clock, authority_id)
        second = await _create(engine, clock, authority_id)

        assert (first, second) == (0, 1)
        assert await engine.registry.count() == 2

    async def test_window_is_start_plus_duration(
        self, engine: BallotEngine, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        """end_time = start_time + duration."""
        start = clock.now() + timedelta(minutes=5)
        proposal_id = await _create(
            engine, clock, authority_id, start_time=start, duration_seconds=90
        )

        view = await engine.registry.get_proposal(proposal_id)
        assert view.proposal.start_time == start
        assert view.proposal.end_time == start + timedelta(seconds=90)
        assert view.proposal.created_by == authority_id
        assert view.state is ProposalState.SCHEDULED

    async def test_non_authority_rejected_without_side_effects(
        self,
        engine: BallotEngine,
        clock: TimeAuthorityStub,
        emitter: TallyEventEmitterStub,
    ) -> None:
        """Only the authority may create proposals."""
        with pytest.raises(UnauthorizedError):
            await _create(engine, clock, "mallory")

        assert await engine.registry.count() == 0
        assert emitter.emitted_events == []

    @pytest.mark.parametrize("offset_seconds", [0, -1, -3600])
    async def test_start_must_be_in_the_future(
        self,
        engine: BallotEngine,
        clock: TimeAuthorityStub,
        authority_id: str,
        offset_seconds: int,
    ) -> None:
        """A start time at or before now is rejected."""
        with pytest.raises(InvalidScheduleError, match="in the future"):
            await _create(
                engine,
                clock,
                authority_id,
                start_time=clock.now() + timedelta(seconds=offset_seconds),
            )
        assert await engine.registry.count() == 0

    @pytest.mark.parametrize("duration", [0, -60])
    async def test_duration_must_be_positive(
        self,
        engine: BallotEngine,
        clock: TimeAuthorityStub,
        authority_id: str,
        duration: int,
    ) -> None:
        with pytest.raises(InvalidScheduleError, match="Duration must be positive"):
            await _create(engine, clock, authority_id, duration_seconds=duration)
        assert await engine.registry.count() == 0

    @pytest.mark.parametrize("duration", [10**12, 10**15])
    async def test_duration_past_calendar_end_rejected(
        self,
        engine: BallotEngine,
        clock: TimeAuthorityStub,
        emitter: TallyEventEmitterStub,
        authority_id: str,
        duration: int,
    ) -> None:
        """An end time beyond datetime.max is a schedule error, not a crash."""
        with pytest.raises(InvalidScheduleError, match="Duration out of range"):
            await _create(engine, clock, authority_id, duration_seconds=duration)
        assert await engine.registry.count() == 0
        assert emitter.emitted_events == []

    async def test_naive_start_time_is_utc(
        self, engine: BallotEngine, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        """Naive datetimes are interpreted as UTC."""
        naive = (clock.now() + timedelta(hours=1)).replace(tzinfo=None)
        proposal_id = await _create(engine, clock, authority_id, start_time=naive)

        view = await engine.registry.get_proposal(proposal_id)
        assert view.proposal.start_time == clock.now() + timedelta(hours=1)

    async def test_counters_start_at_zero_and_belong_to_revealer(
        self,
        engine: BallotEngine,
        clock: TimeAuthorityStub,
        ledger: BallotLedgerStub,
        capability: CiphertextCapabilityStub,
        authority_id: str,
        revealer_id: str,
    ) -> None:
        """Fresh counters encrypt zero; only the revealer may decrypt them."""
        proposal_id = await _create(engine, clock, authority_id)

        tally = await ledger.get_tally(proposal_id)
        for counter in tally.counters():
            assert capability.peek(counter) == 0
            assert capability.allowed_principals(counter) == {revealer_id}
        assert tally.yes_votes != tally.no_votes

    async def test_emits_created_event(
        self,
        engine: BallotEngine,
        clock: TimeAuthorityStub,
        emitter: TallyEventEmitterStub,
        authority_id: str,
    ) -> None:
        proposal_id = await _create(engine, clock, authority_id, title="Budget")

        assert emitter.event_types() == [PROPOSAL_CREATED_EVENT_TYPE]
        event = emitter.emitted_events[0].event
        assert event.proposal_id == proposal_id
        assert event.title == "Budget"


class TestReadProposals:
    """Tests for get_proposal, list_proposals and count."""

    async def test_unknown_id_raises_not_found(self, engine: BallotEngine) -> None:
        with pytest.raises(ProposalNotFoundError):
            await engine.registry.get_proposal(0)

    async def test_list_in_id_order(
        self, engine: BallotEngine, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        for title in ("first", "second", "third"):
            await _create(engine, clock, authority_id, title=title)

        views = await engine.registry.list_proposals()

        assert [view.proposal_id for view in views] == [0, 1, 2]
        assert [view.proposal.title for view in views] == ["first", "second", "third"]

    async def test_state_follows_clock(
        self, engine: BallotEngine, clock: TimeAuthorityStub, authority_id: str
    ) -> None:
        """Scheduled, then active and open, then expired but still active."""
        proposal_id = await _create(engine, clock, authority_id)

        clock.advance(seconds=60)
        view = await engine.registry.get_proposal(proposal_id)
        assert view.state is ProposalState.ACTIVE
        assert view.voting_open is True

        clock.advance(seconds=3600)
        view = await engine.registry.get_proposal(proposal_id)
        assert view.state is ProposalState.ACTIVE
        assert view.voting_open is False
        assert view.is_expired is True
