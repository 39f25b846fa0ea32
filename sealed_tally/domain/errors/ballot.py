"""Ballot submission errors.

Constraints:
- Votes are accepted only inside [start_time, end_time)
- One accepted ballot per (proposal, participant), ever
- A ballot must carry a proof that verifies under the ciphertext backend
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sealed_tally.domain.errors.base import BallotEngineError
from sealed_tally.domain.models.proposal import VotingWindowStatus


class VotingNotOpenError(BallotEngineError):
    """Raised when a ballot arrives outside the voting window.

    The status tells callers whether to come back later (NOT_STARTED)
    or give up (ENDED).

    HTTP Status: 409 Conflict

    Attributes:
        proposal_id: The proposal.
        status: NOT_STARTED or ENDED.
        start_time: Start of the voting window.
        end_time: End of the voting window.
    """

    problem_type = "urn:sealed-tally:ballot:voting-not-open"
    title = "Voting Not Open"
    http_status = 409

    def __init__(
        self,
        proposal_id: int,
        status: VotingWindowStatus,
        start_time: datetime,
        end_time: datetime,
    ) -> None:
        if status is VotingWindowStatus.OPEN:
            raise ValueError("VotingNotOpenError requires a closed window status")
        self.proposal_id = proposal_id
        self.status = status
        self.start_time = start_time
        self.end_time = end_time
        if status is VotingWindowStatus.NOT_STARTED:
            message = (
                f"Voting on proposal {proposal_id} has not started "
                f"(opens {start_time.isoformat()})"
            )
        else:
            message = (
                f"Voting on proposal {proposal_id} has ended "
                f"(closed {end_time.isoformat()})"
            )
        super().__init__(message)

    @property
    def not_started(self) -> bool:
        return self.status is VotingWindowStatus.NOT_STARTED

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "proposal_id": self.proposal_id,
            "window_status": self.status.value,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
        }


class DuplicateVoteError(BallotEngineError):
    """Raised when a participant votes twice on the same proposal.

    HTTP Status: 409 Conflict

    Attributes:
        proposal_id: The proposal.
        voter_id: The participant who already voted.
    """

    problem_type = "urn:sealed-tally:ballot:duplicate-vote"
    title = "Already Voted"
    http_status = 409

    def __init__(self, proposal_id: int, voter_id: str) -> None:
        self.proposal_id = proposal_id
        self.voter_id = voter_id
        super().__init__(
            f"Participant {voter_id} already voted on proposal {proposal_id}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"proposal_id": self.proposal_id, "voter_id": self.voter_id}


class InvalidBallotError(BallotEngineError):
    """Raised when an encrypted ballot fails its validity proof.

    Covers malformed ciphertext bytes, forged or mismatched proofs, and
    proofs that do not attest a value in the permitted domain.

    HTTP Status: 422 Unprocessable Entity

    Attributes:
        reason: Why the ballot was rejected.
        proposal_id: The proposal, when known.
    """

    problem_type = "urn:sealed-tally:ballot:invalid"
    title = "Invalid Ballot"
    http_status = 422

    def __init__(self, reason: str, proposal_id: int | None = None) -> None:
        self.reason = reason
        self.proposal_id = proposal_id
        super().__init__(f"Invalid ballot: {reason}")

    def problem_extensions(self) -> dict[str, Any]:
        if self.proposal_id is None:
            return {}
        return {"proposal_id": self.proposal_id}
