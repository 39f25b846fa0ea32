"""API request/response models."""

from sealed_tally.api.models.proposal import (
    CastVoteRequest,
    CreateProposalRequest,
    HasVotedResponse,
    ProblemDetailResponse,
    ProposalListResponse,
    ProposalResponse,
    ResultsResponse,
    VoteReceiptResponse,
)

__all__ = [
    "CastVoteRequest",
    "CreateProposalRequest",
    "HasVotedResponse",
    "ProblemDetailResponse",
    "ProposalListResponse",
    "ProposalResponse",
    "ResultsResponse",
    "VoteReceiptResponse",
]
