"""Proposal lifecycle event payloads.

Notifications are durable, ordered facts for downstream audit. They
never carry ciphertext handles or individual ballot content.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

# Event type constants following lowercase.dot.notation convention
PROPOSAL_CREATED_EVENT_TYPE: str = "proposal.created"
PROPOSAL_CLOSED_EVENT_TYPE: str = "proposal.closed"

# Schema version for proposal events
PROPOSAL_EVENT_SCHEMA_VERSION: str = "1.0.0"


@dataclass(frozen=True, eq=True)
class ProposalCreatedEvent:
    """Emitted once when the authority registers a proposal.

    Attributes:
        proposal_id: Sequential id of the new proposal.
        title: Proposal title.
        start_time: Start of the voting window (UTC).
        end_time: End of the voting window (UTC).
    """

    event_type: ClassVar[str] = PROPOSAL_CREATED_EVENT_TYPE

    proposal_id: int
    title: str
    start_time: datetime
    end_time: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage."""
        return {
            "proposal_id": self.proposal_id,
            "title": self.title,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "schema_version": PROPOSAL_EVENT_SCHEMA_VERSION,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProposalCreatedEvent:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
        """
        return cls(
            proposal_id=int(data["proposal_id"]),
            title=data["title"],
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(data["end_time"]),
        )


@dataclass(frozen=True, eq=True)
class ProposalClosedEvent:
    """Emitted when the authority closes a proposal, after its results are revealed.

    Attributes:
        proposal_id: The closed proposal.
        closed_by: Authority principal that closed it.
        closed_at: When it was closed (UTC).
    """

    event_type: ClassVar[str] = PROPOSAL_CLOSED_EVENT_TYPE

    proposal_id: int
    closed_by: str
    closed_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage."""
        return {
            "proposal_id": self.proposal_id,
            "closed_by": self.closed_by,
            "closed_at": self.closed_at.isoformat(),
            "schema_version": PROPOSAL_EVENT_SCHEMA_VERSION,
        }
