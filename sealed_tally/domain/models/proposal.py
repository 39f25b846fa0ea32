"""Proposal domain model.

A proposal is a time-bounded yes/no question put to participants by the
authority. Its lifecycle state is derived from the clock for the
Scheduled and Active phases; only an explicit authority action closes it.

Constraints:
- Identity is a sequential integer, immutable once assigned
- end_time = start_time + duration, duration strictly positive
- Closing is the only transition out of Active; Closed is terminal
- An Active proposal whose window elapsed stays Active until closed
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum


class ProposalState(Enum):
    """Lifecycle state of a proposal.

    Values:
        SCHEDULED: Current time is before start_time.
        ACTIVE: Voting window has opened and the proposal is not closed.
            This includes the "expired" phase after end_time where votes
            are refused but results are not yet revealed.
        CLOSED: The authority closed the proposal and results were revealed.
    """

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    CLOSED = "closed"


class VotingWindowStatus(Enum):
    """Position of an instant relative to a proposal's voting window."""

    NOT_STARTED = "not_started"
    OPEN = "open"
    ENDED = "ended"


@dataclass(frozen=True, eq=True)
class Proposal:
    """Stored proposal metadata.

    Attributes:
        proposal_id: Sequential identifier assigned at creation.
        title: Short title shown to participants.
        description: Longer explanation of the question.
        start_time: First instant at which votes are accepted (UTC).
        end_time: First instant at which votes are refused (UTC).
        created_by: Principal that created the proposal (the authority).
        created_at: When the proposal was registered (UTC).
        closed_at: When the authority closed it, None while open.
    """

    proposal_id: int
    title: str
    description: str
    start_time: datetime
    end_time: datetime
    created_by: str
    created_at: datetime
    closed_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate identity and window ordering."""
        if self.proposal_id < 0:
            raise ValueError(
                f"proposal_id must be non-negative, got {self.proposal_id}"
            )
        if self.end_time <= self.start_time:
            raise ValueError(
                f"end_time ({self.end_time.isoformat()}) must be after "
                f"start_time ({self.start_time.isoformat()})"
            )

    @property
    def is_closed(self) -> bool:
        """True once the authority has closed the proposal."""
        return self.closed_at is not None

    @property
    def duration(self) -> timedelta:
        """Length of the voting window."""
        return self.end_time - self.start_time

    def window_status(self, now: datetime) -> VotingWindowStatus:
        """Locate `now` relative to the half-open window [start_time, end_time)."""
        if now < self.start_time:
            return VotingWindowStatus.NOT_STARTED
        if now >= self.end_time:
            return VotingWindowStatus.ENDED
        return VotingWindowStatus.OPEN

    def state_at(self, now: datetime) -> ProposalState:
        """Derive the lifecycle state at `now`.

        Closed wins over any time-based state. Otherwise the proposal is
        Scheduled before start_time and Active from then on, including
        after end_time (there is no automatic close).
        """
        if self.is_closed:
            return ProposalState.CLOSED
        if now < self.start_time:
            return ProposalState.SCHEDULED
        return ProposalState.ACTIVE

    def accepts_votes_at(self, now: datetime) -> bool:
        """True if a ballot submitted at `now` is inside the voting window."""
        return (
            not self.is_closed
            and self.window_status(now) is VotingWindowStatus.OPEN
        )

    def close(self, closed_at: datetime) -> Proposal:
        """Return a closed copy of this proposal.

        Raises:
            ValueError: If the proposal is already closed.
        """
        if self.is_closed:
            raise ValueError(f"Proposal {self.proposal_id} is already closed")
        return replace(self, closed_at=closed_at)


@dataclass(frozen=True, eq=True)
class ProposalView:
    """Read model returned by the registry: metadata plus derived state.

    Attributes:
        proposal: The stored proposal.
        state: Lifecycle state at observed_at.
        voting_open: Whether a ballot would currently be accepted.
        observed_at: The instant the view was computed for.
    """

    proposal: Proposal
    state: ProposalState
    voting_open: bool
    observed_at: datetime

    @classmethod
    def at(cls, proposal: Proposal, now: datetime) -> ProposalView:
        """Build the view of `proposal` as observed at `now`."""
        return cls(
            proposal=proposal,
            state=proposal.state_at(now),
            voting_open=proposal.accepts_votes_at(now),
            observed_at=now,
        )

    @property
    def proposal_id(self) -> int:
        return self.proposal.proposal_id

    @property
    def is_expired(self) -> bool:
        """Window elapsed but the authority has not closed the proposal yet."""
        return (
            self.state is ProposalState.ACTIVE
            and self.observed_at >= self.proposal.end_time
        )

    @property
    def time_remaining(self) -> timedelta:
        """Time left before the window ends, zero once it has ended."""
        remaining = self.proposal.end_time - self.observed_at
        return max(remaining, timedelta(0))
