"""Domain events emitted by the tallying engine."""

from sealed_tally.domain.events.ballot import (
    RESULTS_REVEALED_EVENT_TYPE,
    VOTE_CAST_EVENT_TYPE,
    ResultsRevealedEvent,
    VoteCastEvent,
)
from sealed_tally.domain.events.proposal import (
    PROPOSAL_CLOSED_EVENT_TYPE,
    PROPOSAL_CREATED_EVENT_TYPE,
    ProposalClosedEvent,
    ProposalCreatedEvent,
)

TallyEvent = (
    ProposalCreatedEvent | VoteCastEvent | ResultsRevealedEvent | ProposalClosedEvent
)

__all__: list[str] = [
    "PROPOSAL_CLOSED_EVENT_TYPE",
    "PROPOSAL_CREATED_EVENT_TYPE",
    "RESULTS_REVEALED_EVENT_TYPE",
    "VOTE_CAST_EVENT_TYPE",
    "ProposalClosedEvent",
    "ProposalCreatedEvent",
    "ResultsRevealedEvent",
    "TallyEvent",
    "VoteCastEvent",
]
