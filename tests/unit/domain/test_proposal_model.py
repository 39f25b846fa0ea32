"""Unit tests for the proposal domain model."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from sealed_tally.domain.models.proposal import (
    Proposal,
    ProposalState,
    ProposalView,
    VotingWindowStatus,
)

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=1)


def _proposal(**overrides) -> Proposal:
    fields = {
        "proposal_id": 0,
        "title": "Adopt the new policy",
        "description": "",
        "start_time": START,
        "end_time": END,
        "created_by": "authority",
        "created_at": START - timedelta(minutes=5),
    }
    fields.update(overrides)
    return Proposal(**fields)


class TestProposalValidation:
    """Tests for Proposal construction."""

    def test_rejects_negative_id(self) -> None:
        """Ids are non-negative sequence numbers."""
        with pytest.raises(ValueError, match="non-negative"):
            _proposal(proposal_id=-1)

    def test_rejects_end_not_after_start(self) -> None:
        """A zero-length window is invalid."""
        with pytest.raises(ValueError, match="must be after"):
            _proposal(end_time=START)

    def test_is_frozen(self) -> None:
        """Proposals are immutable values."""
        proposal = _proposal()
        with pytest.raises(FrozenInstanceError):
            proposal.title = "changed"  # type: ignore[misc]

    def test_duration(self) -> None:
        """Duration is end minus start."""
        assert _proposal().duration == timedelta(hours=1)


class TestVotingWindow:
    """Tests for the half-open voting window [start_time, end_time)."""

    def test_before_start_is_not_started(self) -> None:
        """One microsecond before start the window is not open."""
        proposal = _proposal()
        status = proposal.window_status(START - timedelta(microseconds=1))
        assert status is VotingWindowStatus.NOT_STARTED

    def test_start_is_inclusive(self) -> None:
        """The first instant of the window accepts votes."""
        proposal = _proposal()
        assert proposal.window_status(START) is VotingWindowStatus.OPEN
        assert proposal.accepts_votes_at(START)

    def test_end_is_exclusive(self) -> None:
        """At end_time the window has ended."""
        proposal = _proposal()
        assert proposal.window_status(END) is VotingWindowStatus.ENDED
        assert not proposal.accepts_votes_at(END)

    def test_closed_proposal_refuses_votes_inside_window(self) -> None:
        """A closed proposal never accepts votes."""
        proposal = _proposal(closed_at=END + timedelta(seconds=1))
        assert not proposal.accepts_votes_at(START + timedelta(minutes=1))


class TestLifecycleState:
    """Tests for derived lifecycle states."""

    def test_scheduled_before_start(self) -> None:
        """Scheduled until the window opens."""
        state = _proposal().state_at(START - timedelta(seconds=1))
        assert state is ProposalState.SCHEDULED

    def test_active_inside_window(self) -> None:
        """Active once the window opens."""
        assert _proposal().state_at(START) is ProposalState.ACTIVE

    def test_stays_active_after_end_until_closed(self) -> None:
        """There is no automatic close."""
        assert _proposal().state_at(END + timedelta(days=3)) is ProposalState.ACTIVE

    def test_close_returns_closed_copy(self) -> None:
        """close() produces a Closed proposal without touching the original."""
        original = _proposal()
        closed_at = END + timedelta(seconds=1)

        closed = original.close(closed_at)

        assert closed.is_closed
        assert closed.closed_at == closed_at
        assert closed.state_at(closed_at) is ProposalState.CLOSED
        assert not original.is_closed

    def test_close_twice_raises(self) -> None:
        """Closed is terminal."""
        closed = _proposal().close(END)
        with pytest.raises(ValueError, match="already closed"):
            closed.close(END + timedelta(seconds=1))


class TestProposalView:
    """Tests for the registry read model."""

    def test_view_inside_window(self) -> None:
        """An open window reports voting_open and time remaining."""
        now = START + timedelta(minutes=15)
        view = ProposalView.at(_proposal(), now)

        assert view.proposal_id == 0
        assert view.state is ProposalState.ACTIVE
        assert view.voting_open is True
        assert view.is_expired is False
        assert view.time_remaining == timedelta(minutes=45)

    def test_view_after_end_is_expired(self) -> None:
        """Window elapsed but not closed reads as expired with no time left."""
        view = ProposalView.at(_proposal(), END + timedelta(minutes=1))

        assert view.state is ProposalState.ACTIVE
        assert view.voting_open is False
        assert view.is_expired is True
        assert view.time_remaining == timedelta(0)

    def test_closed_view_is_not_expired(self) -> None:
        """Closing clears the expired flag."""
        closed_at = END + timedelta(minutes=1)
        view = ProposalView.at(_proposal().close(closed_at), closed_at)

        assert view.state is ProposalState.CLOSED
        assert view.is_expired is False
