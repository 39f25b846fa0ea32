"""Proposal lifecycle errors.

Covers lookups of unknown proposals, invalid schedules at creation, and
closing attempts made at the wrong time or more than once.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sealed_tally.domain.errors.base import BallotEngineError


class ProposalNotFoundError(BallotEngineError):
    """Raised when a proposal id has never been assigned.

    HTTP Status: 404 Not Found

    Attributes:
        proposal_id: The id that was looked up.
    """

    problem_type = "urn:sealed-tally:proposal:not-found"
    title = "Proposal Not Found"
    http_status = 404

    def __init__(self, proposal_id: int) -> None:
        self.proposal_id = proposal_id
        super().__init__(f"Proposal does not exist: {proposal_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"proposal_id": self.proposal_id}


class InvalidScheduleError(BallotEngineError):
    """Raised when a proposal is created with a bad start time or duration.

    The start time must be strictly in the future and the duration
    strictly positive.

    HTTP Status: 422 Unprocessable Entity

    Attributes:
        reason: Which rule was violated.
        start_time: Requested start of the voting window.
        duration_seconds: Requested window length.
    """

    problem_type = "urn:sealed-tally:proposal:invalid-schedule"
    title = "Invalid Schedule"
    http_status = 422

    def __init__(
        self,
        reason: str,
        start_time: datetime,
        duration_seconds: int,
    ) -> None:
        self.reason = reason
        self.start_time = start_time
        self.duration_seconds = duration_seconds
        super().__init__(reason)

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "start_time": self.start_time.isoformat(),
            "duration_seconds": self.duration_seconds,
        }


class VotingStillOpenError(BallotEngineError):
    """Raised when closing is attempted before the window has elapsed.

    Closing requires the current time to be strictly after end_time.

    HTTP Status: 409 Conflict

    Attributes:
        proposal_id: The proposal.
        end_time: End of its voting window.
    """

    problem_type = "urn:sealed-tally:proposal:voting-still-open"
    title = "Voting Still Open"
    http_status = 409

    def __init__(self, proposal_id: int, end_time: datetime) -> None:
        self.proposal_id = proposal_id
        self.end_time = end_time
        super().__init__(
            f"Voting period for proposal {proposal_id} has not ended "
            f"(ends {end_time.isoformat()})"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "proposal_id": self.proposal_id,
            "end_time": self.end_time.isoformat(),
        }


class ProposalAlreadyClosedError(BallotEngineError):
    """Raised when a closed proposal is closed again.

    HTTP Status: 409 Conflict

    Attributes:
        proposal_id: The proposal.
        closed_at: When it was first closed.
    """

    problem_type = "urn:sealed-tally:proposal:already-closed"
    title = "Proposal Already Closed"
    http_status = 409

    def __init__(self, proposal_id: int, closed_at: datetime) -> None:
        self.proposal_id = proposal_id
        self.closed_at = closed_at
        super().__init__(
            f"Proposal {proposal_id} was already closed at {closed_at.isoformat()}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "proposal_id": self.proposal_id,
            "closed_at": self.closed_at.isoformat(),
        }
