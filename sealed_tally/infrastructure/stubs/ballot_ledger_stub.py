"""Ballot ledger stub implementation.

In-memory ledger for development and testing. An asyncio.Lock provides
the total order a replicated ledger would; writes inside one call are
applied together, so a failed check leaves no partial state.

WARNING: This is a development stub. Not for production use.
"""

from __future__ import annotations

import asyncio
from contextlib import AbstractAsyncContextManager

from sealed_tally.domain.errors import DuplicateVoteError, ProposalNotFoundError
from sealed_tally.domain.models.proposal import Proposal
from sealed_tally.domain.models.tally import EncryptedTally, RevealedResult

# DEV_MODE_WATERMARK per dev stub convention
DEV_MODE_WATERMARK: str = "DEV_STUB:BallotLedgerStub:v1"


class BallotLedgerStub:
    """In-memory implementation of BallotLedgerProtocol.

    Attributes:
        _proposals: proposal_id -> Proposal, ids dense from 0.
        _tallies: proposal_id -> current encrypted counters.
        _voters: proposal_id -> voter ids with an accepted ballot.
        _results: proposal_id -> revealed result.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._proposals: dict[int, Proposal] = {}
        self._tallies: dict[int, EncryptedTally] = {}
        self._voters: dict[int, set[str]] = {}
        self._results: dict[int, RevealedResult] = {}

    def serialized(self) -> AbstractAsyncContextManager[None]:
        return self._lock

    async def next_proposal_id(self) -> int:
        return len(self._proposals)

    async def create_proposal(
        self,
        proposal: Proposal,
        tally: EncryptedTally,
    ) -> None:
        expected = len(self._proposals)
        if proposal.proposal_id != expected:
            raise ValueError(
                f"Expected proposal id {expected}, got {proposal.proposal_id}"
            )
        if tally.proposal_id != proposal.proposal_id:
            raise ValueError("Tally does not belong to the proposal")
        self._proposals[proposal.proposal_id] = proposal
        self._tallies[proposal.proposal_id] = tally
        self._voters[proposal.proposal_id] = set()

    async def get_proposal(self, proposal_id: int) -> Proposal | None:
        return self._proposals.get(proposal_id)

    async def list_proposals(self) -> list[Proposal]:
        return [self._proposals[pid] for pid in sorted(self._proposals)]

    async def count_proposals(self) -> int:
        return len(self._proposals)

    async def get_tally(self, proposal_id: int) -> EncryptedTally | None:
        return self._tallies.get(proposal_id)

    async def has_vote_record(self, proposal_id: int, voter_id: str) -> bool:
        return voter_id in self._voters.get(proposal_id, set())

    async def count_vote_records(self, proposal_id: int) -> int:
        return len(self._voters.get(proposal_id, set()))

    async def record_vote(
        self,
        proposal_id: int,
        voter_id: str,
        tally: EncryptedTally,
    ) -> None:
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(proposal_id)
        if proposal.is_closed:
            raise ValueError(f"Proposal {proposal_id} is closed")
        if tally.proposal_id != proposal_id:
            raise ValueError("Tally does not belong to the proposal")
        voters = self._voters[proposal_id]
        if voter_id in voters:
            raise DuplicateVoteError(proposal_id=proposal_id, voter_id=voter_id)
        voters.add(voter_id)
        self._tallies[proposal_id] = tally

    async def get_result(self, proposal_id: int) -> RevealedResult | None:
        return self._results.get(proposal_id)

    async def record_reveal(
        self,
        proposal: Proposal,
        result: RevealedResult,
    ) -> None:
        proposal_id = proposal.proposal_id
        if proposal_id not in self._proposals:
            raise ProposalNotFoundError(proposal_id)
        if not proposal.is_closed:
            raise ValueError(f"Proposal {proposal_id} must be closed to reveal")
        if proposal_id in self._results:
            raise ValueError(f"Proposal {proposal_id} already has a result")
        if result.proposal_id != proposal_id or not result.revealed:
            raise ValueError("Result does not match the proposal")
        self._proposals[proposal_id] = proposal
        self._results[proposal_id] = result

    # Test helpers

    def clear(self) -> None:
        """Clear all stored data."""
        self._proposals.clear()
        self._tallies.clear()
        self._voters.clear()
        self._results.clear()
