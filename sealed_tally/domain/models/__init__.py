"""Domain models for Sealed Tally."""

from sealed_tally.domain.models.ciphertext import Ciphertext, EncryptedBool
from sealed_tally.domain.models.proposal import (
    Proposal,
    ProposalState,
    ProposalView,
    VotingWindowStatus,
)
from sealed_tally.domain.models.tally import (
    EncryptedTally,
    RevealedResult,
    VoteChoice,
    VoteReceipt,
)

__all__: list[str] = [
    "Ciphertext",
    "EncryptedBool",
    "EncryptedTally",
    "Proposal",
    "ProposalState",
    "ProposalView",
    "RevealedResult",
    "VoteChoice",
    "VoteReceipt",
    "VotingWindowStatus",
]
