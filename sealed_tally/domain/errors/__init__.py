"""Domain errors for Sealed Tally.

Provides specific exception classes for each failure kind.
All exceptions inherit from SealedTallyError via BallotEngineError.
"""

from sealed_tally.domain.errors.authority import AccessDeniedError, UnauthorizedError
from sealed_tally.domain.errors.ballot import (
    DuplicateVoteError,
    InvalidBallotError,
    VotingNotOpenError,
)
from sealed_tally.domain.errors.base import BallotEngineError
from sealed_tally.domain.errors.proposal import (
    InvalidScheduleError,
    ProposalAlreadyClosedError,
    ProposalNotFoundError,
    VotingStillOpenError,
)

__all__: list[str] = [
    "AccessDeniedError",
    "BallotEngineError",
    "DuplicateVoteError",
    "InvalidBallotError",
    "InvalidScheduleError",
    "ProposalAlreadyClosedError",
    "ProposalNotFoundError",
    "UnauthorizedError",
    "VotingNotOpenError",
    "VotingStillOpenError",
]
