"""Ballot and result event payloads.

Constraints:
- A vote-cast event names who voted, never what they chose
- The results-revealed event is the only event carrying plaintext counts
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

VOTE_CAST_EVENT_TYPE: str = "ballot.vote_cast"
RESULTS_REVEALED_EVENT_TYPE: str = "ballot.results_revealed"

BALLOT_EVENT_SCHEMA_VERSION: str = "1.0.0"


@dataclass(frozen=True, eq=True)
class VoteCastEvent:
    """Emitted after a ballot is folded into the encrypted counters.

    Attributes:
        proposal_id: Proposal voted on.
        voter_id: Participant whose ballot was accepted.
        cast_at: When the ballot was accepted (UTC).
    """

    event_type: ClassVar[str] = VOTE_CAST_EVENT_TYPE

    proposal_id: int
    voter_id: str
    cast_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage."""
        return {
            "proposal_id": self.proposal_id,
            "voter_id": self.voter_id,
            "cast_at": self.cast_at.isoformat(),
            "schema_version": BALLOT_EVENT_SCHEMA_VERSION,
        }


@dataclass(frozen=True, eq=True)
class ResultsRevealedEvent:
    """Emitted when closing decrypts the counters of a proposal.

    Attributes:
        proposal_id: The proposal.
        yes_count: Decrypted YES total.
        no_count: Decrypted NO total.
        revealed_at: When decryption completed (UTC).
    """

    event_type: ClassVar[str] = RESULTS_REVEALED_EVENT_TYPE

    proposal_id: int
    yes_count: int
    no_count: int
    revealed_at: datetime

    def __post_init__(self) -> None:
        """Validate counts are non-negative."""
        if self.yes_count < 0 or self.no_count < 0:
            raise ValueError(
                f"revealed counts must be non-negative, got "
                f"yes={self.yes_count} no={self.no_count}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage."""
        return {
            "proposal_id": self.proposal_id,
            "yes_count": self.yes_count,
            "no_count": self.no_count,
            "revealed_at": self.revealed_at.isoformat(),
            "schema_version": BALLOT_EVENT_SCHEMA_VERSION,
        }
