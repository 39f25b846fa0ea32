"""Proposal and ballot API routes.

FastAPI router for the confidential tallying engine. The caller
principal is taken from the `X-Principal-Id` header and assumed to be
authenticated upstream.

Engine errors are returned as RFC 7807 problem details with the status
carried by the error class (403 unauthorized, 404 unknown proposal,
409 lifecycle conflicts, 422 invalid schedule or ballot).
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from sealed_tally.api.dependencies.voting import (
    get_ballot_accumulator_service,
    get_principal_id,
    get_proposal_registry_service,
    get_tally_revealer_service,
)
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
from sealed_tally.application.services import (
    BallotAccumulatorService,
    ProposalRegistryService,
    TallyRevealerService,
)
from sealed_tally.domain.errors import BallotEngineError, InvalidBallotError

router = APIRouter(prefix="/v1/proposals", tags=["proposals"])


def _problem(error: BallotEngineError, request: Request) -> HTTPException:
    """Convert an engine error into an RFC 7807 HTTPException."""
    detail = error.to_rfc7807_dict()
    detail["instance"] = str(request.url)
    return HTTPException(status_code=error.http_status, detail=detail)


def _decode_hex(value: str, field: str, proposal_id: int) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise InvalidBallotError(
            f"{field} is not valid hex", proposal_id=proposal_id
        ) from None


@router.post(
    "",
    response_model=ProposalResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {
            "model": ProblemDetailResponse,
            "description": "Caller is not the authority",
        },
        422: {"model": ProblemDetailResponse, "description": "Invalid schedule"},
    },
    summary="Create a proposal",
)
async def create_proposal(
    request_data: CreateProposalRequest,
    request: Request,
    caller: str = Depends(get_principal_id),
    registry: ProposalRegistryService = Depends(get_proposal_registry_service),
) -> ProposalResponse:
    """Register a proposal with fresh zero counters. Authority only."""
    try:
        proposal_id = await registry.create_proposal(
            caller=caller,
            title=request_data.title,
            description=request_data.description,
            start_time=request_data.start_time,
            duration_seconds=request_data.duration_seconds,
        )
        view = await registry.get_proposal(proposal_id)
    except BallotEngineError as e:
        raise _problem(e, request) from None
    return ProposalResponse.from_view(view)


@router.get(
    "",
    response_model=ProposalListResponse,
    summary="List all proposals",
)
async def list_proposals(
    registry: ProposalRegistryService = Depends(get_proposal_registry_service),
) -> ProposalListResponse:
    views = await registry.list_proposals()
    return ProposalListResponse(
        proposals=[ProposalResponse.from_view(view) for view in views],
        count=len(views),
    )


@router.get(
    "/{proposal_id}",
    response_model=ProposalResponse,
    responses={404: {"model": ProblemDetailResponse}},
    summary="Get a proposal",
)
async def get_proposal(
    proposal_id: int,
    request: Request,
    registry: ProposalRegistryService = Depends(get_proposal_registry_service),
) -> ProposalResponse:
    try:
        view = await registry.get_proposal(proposal_id)
    except BallotEngineError as e:
        raise _problem(e, request) from None
    return ProposalResponse.from_view(view)


@router.post(
    "/{proposal_id}/votes",
    response_model=VoteReceiptResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ProblemDetailResponse, "description": "Unknown proposal"},
        409: {
            "model": ProblemDetailResponse,
            "description": "Voting not open or participant already voted",
        },
        422: {"model": ProblemDetailResponse, "description": "Invalid ballot"},
    },
    summary="Cast an encrypted ballot",
)
async def cast_vote(
    proposal_id: int,
    request_data: CastVoteRequest,
    request: Request,
    voter_id: str = Depends(get_principal_id),
    accumulator: BallotAccumulatorService = Depends(get_ballot_accumulator_service),
) -> VoteReceiptResponse:
    """Fold one encrypted ballot into the proposal's counters.

    The response acknowledges acceptance only; the choice stays encrypted.
    """
    try:
        receipt = await accumulator.cast_vote(
            proposal_id=proposal_id,
            voter_id=voter_id,
            encrypted_choice=_decode_hex(
                request_data.encrypted_choice, "encrypted_choice", proposal_id
            ),
            validity_proof=_decode_hex(
                request_data.validity_proof, "validity_proof", proposal_id
            ),
        )
    except BallotEngineError as e:
        raise _problem(e, request) from None
    return VoteReceiptResponse.from_receipt(receipt)


@router.get(
    "/{proposal_id}/votes/{voter_id}",
    response_model=HasVotedResponse,
    responses={404: {"model": ProblemDetailResponse}},
    summary="Check whether a participant has voted",
)
async def has_voted(
    proposal_id: int,
    voter_id: str,
    request: Request,
    accumulator: BallotAccumulatorService = Depends(get_ballot_accumulator_service),
) -> HasVotedResponse:
    try:
        voted = await accumulator.has_voted(proposal_id, voter_id)
    except BallotEngineError as e:
        raise _problem(e, request) from None
    return HasVotedResponse(proposal_id=proposal_id, voter_id=voter_id, has_voted=voted)


@router.post(
    "/{proposal_id}/close",
    response_model=ResultsResponse,
    responses={
        403: {
            "model": ProblemDetailResponse,
            "description": "Caller is not the authority",
        },
        404: {"model": ProblemDetailResponse, "description": "Unknown proposal"},
        409: {
            "model": ProblemDetailResponse,
            "description": "Voting still open or proposal already closed",
        },
        500: {"model": ProblemDetailResponse, "description": "Decryption refused"},
    },
    summary="Close a proposal and reveal its counts",
)
async def close_proposal(
    proposal_id: int,
    request: Request,
    caller: str = Depends(get_principal_id),
    revealer: TallyRevealerService = Depends(get_tally_revealer_service),
) -> ResultsResponse:
    try:
        result = await revealer.close_proposal(proposal_id, caller)
    except BallotEngineError as e:
        raise _problem(e, request) from None
    return ResultsResponse.from_result(result)


@router.get(
    "/{proposal_id}/results",
    response_model=ResultsResponse,
    responses={404: {"model": ProblemDetailResponse}},
    summary="Get the results of a proposal",
)
async def get_results(
    proposal_id: int,
    request: Request,
    revealer: TallyRevealerService = Depends(get_tally_revealer_service),
) -> ResultsResponse:
    """Return revealed counts, or zeros with revealed=false while open."""
    try:
        result = await revealer.get_results(proposal_id)
    except BallotEngineError as e:
        raise _problem(e, request) from None
    return ResultsResponse.from_result(result)
