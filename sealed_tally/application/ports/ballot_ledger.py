"""Ballot ledger port - persistence for proposals, tallies and vote records.

The ledger is the engine's shared state. Operations are totally ordered:
every service runs its read-check-write sequence inside `serialized()`,
mirroring a replicated ledger that executes transactions one at a time.

Constraints:
- Proposal ids are sequential, starting at 0, never reused
- A (proposal_id, voter_id) vote record is inserted at most once
- record_vote writes the vote record and the new tally together or not at all
- record_reveal writes the closed proposal and its result together or not at all
- The tally of a closed proposal is never replaced
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sealed_tally.domain.models.proposal import Proposal
from sealed_tally.domain.models.tally import EncryptedTally, RevealedResult


class BallotLedgerProtocol(Protocol):
    """Protocol for ballot engine persistence.

    Methods:
        serialized: Scope that totally orders engine operations.
        next_proposal_id: Peek the id the next proposal will receive.
        create_proposal: Store a new proposal with its initial tally.
        get_proposal / list_proposals / count_proposals: Reads.
        get_tally: Current encrypted counters of a proposal.
        has_vote_record / count_vote_records: Vote record reads.
        record_vote: Atomically add a vote record and replace the tally.
        get_result: Revealed result of a proposal, if any.
        record_reveal: Atomically store closed proposal and its result.
    """

    def serialized(self) -> AbstractAsyncContextManager[None]:
        """Return the async context manager that serializes operations."""
        ...

    async def next_proposal_id(self) -> int:
        """Return the id the next created proposal will receive."""
        ...

    async def create_proposal(
        self,
        proposal: Proposal,
        tally: EncryptedTally,
    ) -> None:
        """Store a new proposal and its initial encrypted tally.

        Raises:
            ValueError: If proposal.proposal_id is not the next id.
        """
        ...

    async def get_proposal(self, proposal_id: int) -> Proposal | None:
        """Return the stored proposal or None if the id is unassigned."""
        ...

    async def list_proposals(self) -> list[Proposal]:
        """Return all proposals ordered by id."""
        ...

    async def count_proposals(self) -> int:
        """Return the number of proposals ever created."""
        ...

    async def get_tally(self, proposal_id: int) -> EncryptedTally | None:
        """Return the current encrypted counters of a proposal."""
        ...

    async def has_vote_record(self, proposal_id: int, voter_id: str) -> bool:
        """Return True if voter_id has an accepted ballot on proposal_id."""
        ...

    async def count_vote_records(self, proposal_id: int) -> int:
        """Return the number of accepted ballots on proposal_id."""
        ...

    async def record_vote(
        self,
        proposal_id: int,
        voter_id: str,
        tally: EncryptedTally,
    ) -> None:
        """Insert the vote record and replace the tally atomically.

        Raises:
            DuplicateVoteError: If the (proposal_id, voter_id) pair exists.
            ProposalNotFoundError: If the proposal does not exist.
            ValueError: If the proposal is already closed.
        """
        ...

    async def get_result(self, proposal_id: int) -> RevealedResult | None:
        """Return the revealed result, None before the proposal is closed."""
        ...

    async def record_reveal(
        self,
        proposal: Proposal,
        result: RevealedResult,
    ) -> None:
        """Store the closed proposal and its revealed result atomically.

        Raises:
            ProposalNotFoundError: If the proposal does not exist.
            ValueError: If the proposal is not closed or a result exists.
        """
        ...
