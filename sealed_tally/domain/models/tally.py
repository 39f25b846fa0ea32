"""Ballot and tally domain models.

Constraints:
- A ballot encodes exactly one of two choices: NO (0) or YES (1)
- Revealed counts are non-negative and immutable once revealed
- A result that is not revealed always reads as zero counts
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

from sealed_tally.domain.models.ciphertext import Ciphertext


class VoteChoice(IntEnum):
    """Plaintext encoding of a ballot choice.

    The integer value is what a participant encrypts client-side.
    """

    NO = 0
    YES = 1


@dataclass(frozen=True, eq=True)
class VoteReceipt:
    """Acknowledgement of an accepted ballot.

    Carries no information about the choice itself.

    Attributes:
        proposal_id: Proposal the ballot was cast on.
        voter_id: Principal that cast the ballot.
        cast_at: When the ballot was accepted (UTC).
    """

    proposal_id: int
    voter_id: str
    cast_at: datetime


@dataclass(frozen=True, eq=True)
class RevealedResult:
    """Plaintext outcome of a proposal.

    Attributes:
        proposal_id: Proposal the result belongs to.
        yes_count: Number of YES ballots (0 until revealed).
        no_count: Number of NO ballots (0 until revealed).
        revealed: True only after the authority closed the proposal.
        revealed_at: When the counters were decrypted, None before.
    """

    proposal_id: int
    yes_count: int = 0
    no_count: int = 0
    revealed: bool = False
    revealed_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate counts and the revealed flag."""
        if self.yes_count < 0 or self.no_count < 0:
            raise ValueError(
                f"counts must be non-negative, got yes={self.yes_count} "
                f"no={self.no_count}"
            )
        if not self.revealed and (self.yes_count or self.no_count):
            raise ValueError("unrevealed result must carry zero counts")
        if self.revealed and self.revealed_at is None:
            raise ValueError("revealed result requires revealed_at")

    @classmethod
    def pending(cls, proposal_id: int) -> RevealedResult:
        """Result placeholder for a proposal that has not been closed."""
        return cls(proposal_id=proposal_id)

    @property
    def total(self) -> int:
        return self.yes_count + self.no_count

    @property
    def yes_percentage(self) -> float:
        """Share of YES ballots in percent, 0.0 when nobody voted."""
        if self.total == 0:
            return 0.0
        return round(self.yes_count * 100 / self.total, 1)

    @property
    def no_percentage(self) -> float:
        """Share of NO ballots in percent, 0.0 when nobody voted."""
        if self.total == 0:
            return 0.0
        return round(self.no_count * 100 / self.total, 1)

    @property
    def passed(self) -> bool:
        """True if revealed with a strict YES majority."""
        return self.revealed and self.yes_count > self.no_count


@dataclass(frozen=True, eq=True)
class EncryptedTally:
    """Running encrypted counters for one proposal.

    Replaced wholesale on every accepted ballot; never mutated in place
    and never replaced once the proposal is closed.

    Attributes:
        proposal_id: Proposal the counters belong to.
        yes_votes: Encrypted number of YES ballots.
        no_votes: Encrypted number of NO ballots.
    """

    proposal_id: int
    yes_votes: Ciphertext
    no_votes: Ciphertext

    def counters(self) -> tuple[Ciphertext, Ciphertext]:
        """Return (yes_votes, no_votes)."""
        return self.yes_votes, self.no_votes
