"""Proposal and ballot API request/response models.

Ciphertexts and proofs travel as hex strings. Responses never carry a
participant's choice; counts appear only once a proposal is closed.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

from sealed_tally.domain.models.proposal import ProposalView
from sealed_tally.domain.models.tally import RevealedResult, VoteReceipt

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class CreateProposalRequest(BaseModel):
    """Request to register a new proposal (authority only)."""

    title: str = Field(..., min_length=1, description="Short proposal title")
    description: str = Field(default="", description="Longer explanation")
    start_time: datetime = Field(
        ...,
        description="When voting opens; must be in the future",
    )
    duration_seconds: int = Field(
        ...,
        description="Length of the voting window in seconds",
    )


class ProposalResponse(BaseModel):
    """Proposal metadata with its lifecycle state at request time.

    Attributes:
        state: scheduled, active or closed.
        voting_open: Whether a ballot submitted now would be accepted.
        is_expired: Window elapsed, waiting for the authority to close.
        time_remaining_seconds: Seconds left in the window, 0 once ended.
    """

    proposal_id: int
    title: str
    description: str
    start_time: DateTimeWithZ
    end_time: DateTimeWithZ
    created_by: str
    state: str
    voting_open: bool
    is_expired: bool
    time_remaining_seconds: int
    closed_at: DateTimeWithZ | None = None

    @classmethod
    def from_view(cls, view: ProposalView) -> "ProposalResponse":
        proposal = view.proposal
        return cls(
            proposal_id=proposal.proposal_id,
            title=proposal.title,
            description=proposal.description,
            start_time=proposal.start_time,
            end_time=proposal.end_time,
            created_by=proposal.created_by,
            state=view.state.value,
            voting_open=view.voting_open,
            is_expired=view.is_expired,
            time_remaining_seconds=int(view.time_remaining.total_seconds()),
            closed_at=proposal.closed_at,
        )


class ProposalListResponse(BaseModel):
    """All proposals in id order."""

    proposals: list[ProposalResponse]
    count: int


class CastVoteRequest(BaseModel):
    """Encrypted ballot produced client-side."""

    encrypted_choice: str = Field(
        ...,
        min_length=2,
        description="Hex-encoded ciphertext of 0 (NO) or 1 (YES)",
    )
    validity_proof: str = Field(
        ...,
        min_length=2,
        description="Hex-encoded proof accompanying the ciphertext",
    )


class VoteReceiptResponse(BaseModel):
    """Acknowledgement of an accepted ballot. Carries no choice."""

    proposal_id: int
    voter_id: str
    cast_at: DateTimeWithZ

    @classmethod
    def from_receipt(cls, receipt: VoteReceipt) -> "VoteReceiptResponse":
        return cls(
            proposal_id=receipt.proposal_id,
            voter_id=receipt.voter_id,
            cast_at=receipt.cast_at,
        )


class HasVotedResponse(BaseModel):
    proposal_id: int
    voter_id: str
    has_voted: bool


class ResultsResponse(BaseModel):
    """Revealed counts, or zeros with revealed=false before closing."""

    proposal_id: int
    yes_count: int
    no_count: int
    revealed: bool
    revealed_at: DateTimeWithZ | None = None
    total: int
    yes_percentage: float
    no_percentage: float
    passed: bool

    @classmethod
    def from_result(cls, result: RevealedResult) -> "ResultsResponse":
        return cls(
            proposal_id=result.proposal_id,
            yes_count=result.yes_count,
            no_count=result.no_count,
            revealed=result.revealed,
            revealed_at=result.revealed_at,
            total=result.total,
            yes_percentage=result.yes_percentage,
            no_percentage=result.no_percentage,
            passed=result.passed,
        )


class ProblemDetailResponse(BaseModel):
    """RFC 7807 problem details body (error-specific members omitted)."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
