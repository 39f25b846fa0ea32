"""Application services for Sealed Tally."""

from sealed_tally.application.services.access_control_service import (
    AccessControlService,
)
from sealed_tally.application.services.ballot_accumulator_service import (
    BallotAccumulatorService,
)
from sealed_tally.application.services.proposal_registry_service import (
    ProposalRegistryService,
)
from sealed_tally.application.services.tally_revealer_service import (
    TallyRevealerService,
)
from sealed_tally.application.services.time_authority_service import (
    TimeAuthorityService,
)

__all__: list[str] = [
    "AccessControlService",
    "BallotAccumulatorService",
    "ProposalRegistryService",
    "TallyRevealerService",
    "TimeAuthorityService",
]
