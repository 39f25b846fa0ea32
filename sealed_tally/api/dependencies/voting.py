"""Voting API dependencies.

Module-level singleton engine wired to the development stubs and the
system clock. Tests replace it through `app.dependency_overrides[get_engine]`
or `set_engine()`.

Note: a production deployment would back the ledger with a replicated
store and the capability with a real homomorphic backend.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from sealed_tally.application.services import (
    BallotAccumulatorService,
    ProposalRegistryService,
    TallyRevealerService,
)
from sealed_tally.bootstrap import BallotEngine, build_engine
from sealed_tally.config import TallyConfig

PRINCIPAL_HEADER = "X-Principal-Id"

_engine: BallotEngine | None = None


def get_engine() -> BallotEngine:
    """Get the engine instance, building it from the environment once."""
    global _engine
    if _engine is None:
        _engine = build_engine(TallyConfig.from_environment())
    return _engine


def set_engine(engine: BallotEngine | None) -> None:
    """Replace the engine singleton. None resets it."""
    global _engine
    _engine = engine


def get_proposal_registry_service(
    engine: BallotEngine = Depends(get_engine),
) -> ProposalRegistryService:
    return engine.registry


def get_ballot_accumulator_service(
    engine: BallotEngine = Depends(get_engine),
) -> BallotAccumulatorService:
    return engine.accumulator


def get_tally_revealer_service(
    engine: BallotEngine = Depends(get_engine),
) -> TallyRevealerService:
    return engine.revealer


def get_principal_id(
    request: Request,
    x_principal_id: Annotated[
        str | None,
        Header(
            alias=PRINCIPAL_HEADER,
            description="Pre-authenticated principal invoking the operation",
        ),
    ] = None,
) -> str:
    """Extract the caller principal from the request header.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if not x_principal_id or not x_principal_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "type": "urn:sealed-tally:access:unauthenticated",
                "title": "Principal Required",
                "status": 401,
                "detail": f"{PRINCIPAL_HEADER} header is required",
                "instance": str(request.url),
            },
        )
    return x_principal_id.strip()
