"""FastAPI dependency providers."""

from sealed_tally.api.dependencies.voting import (
    get_ballot_accumulator_service,
    get_engine,
    get_principal_id,
    get_proposal_registry_service,
    get_tally_revealer_service,
    set_engine,
)

__all__ = [
    "get_ballot_accumulator_service",
    "get_engine",
    "get_principal_id",
    "get_proposal_registry_service",
    "get_tally_revealer_service",
    "set_engine",
]
