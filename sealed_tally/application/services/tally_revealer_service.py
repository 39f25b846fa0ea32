"""Tally Revealer service.

Closes proposals and turns their encrypted counters into plaintext
results. This is the only place plaintext totals come into existence.

Closing preconditions, checked in order:
1. Caller is the authority           -> UnauthorizedError
2. Proposal exists                   -> ProposalNotFoundError
3. Proposal is not already closed    -> ProposalAlreadyClosedError
4. Now is strictly after end_time    -> VotingStillOpenError

There is no automatic close when the window elapses: decryption is an
authority-gated side effect.
"""

from __future__ import annotations

from structlog import get_logger

from sealed_tally.application.ports.ballot_ledger import BallotLedgerProtocol
from sealed_tally.application.ports.ciphertext_capability import (
    CiphertextCapabilityProtocol,
)
from sealed_tally.application.ports.tally_event_emitter import TallyEventEmitterPort
from sealed_tally.application.ports.time_authority import TimeAuthorityProtocol
from sealed_tally.application.services.access_control_service import (
    AccessControlService,
)
from sealed_tally.application.services.event_publishing import emit_committed
from sealed_tally.domain.errors import (
    AccessDeniedError,
    ProposalAlreadyClosedError,
    ProposalNotFoundError,
    VotingStillOpenError,
)
from sealed_tally.domain.events import ProposalClosedEvent, ResultsRevealedEvent
from sealed_tally.domain.models.tally import RevealedResult

logger = get_logger(__name__)


class TallyRevealerService:
    """Service that closes proposals and reveals their results.

    Decryption happens before anything is written, so a failed decrypt
    (e.g. AccessDeniedError) leaves the proposal Active and unrevealed.
    """

    def __init__(
        self,
        ledger: BallotLedgerProtocol,
        capability: CiphertextCapabilityProtocol,
        access_control: AccessControlService,
        event_emitter: TallyEventEmitterPort,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize the tally revealer.

        Args:
            ledger: Shared ballot ledger.
            capability: Ciphertext backend used for decryption.
            access_control: Authority check and revealer identity.
            event_emitter: Publisher for results/closed events.
            time_authority: Clock used to check the window has elapsed.
        """
        self._ledger = ledger
        self._capability = capability
        self._access_control = access_control
        self._event_emitter = event_emitter
        self._time = time_authority

    async def close_proposal(self, proposal_id: int, caller: str) -> RevealedResult:
        """Close a proposal and reveal its counts.

        Args:
            proposal_id: Proposal to close.
            caller: Principal invoking the operation.

        Returns:
            The revealed result (revealed=True).

        Raises:
            UnauthorizedError: Caller is not the authority.
            ProposalNotFoundError: Unknown proposal id.
            ProposalAlreadyClosedError: Proposal was closed before.
            VotingStillOpenError: end_time has not passed yet.
            AccessDeniedError: The revealer holds no grant on a counter.
        """
        log = logger.bind(proposal_id=proposal_id, caller=caller)

        self._access_control.require_authority(caller, "close proposals")

        async with self._ledger.serialized():
            proposal = await self._ledger.get_proposal(proposal_id)
            if proposal is None:
                log.warning("Close rejected - proposal not found")
                raise ProposalNotFoundError(proposal_id)

            if proposal.closed_at is not None:
                log.warning("Close rejected - already closed")
                raise ProposalAlreadyClosedError(proposal_id, proposal.closed_at)

            now = self._time.now()
            if now <= proposal.end_time:
                log.warning(
                    "Close rejected - voting still open",
                    end_time=proposal.end_time.isoformat(),
                )
                raise VotingStillOpenError(proposal_id, proposal.end_time)

            tally = await self._ledger.get_tally(proposal_id)
            if tally is None:
                raise ProposalNotFoundError(proposal_id)

            revealer = self._access_control.revealer_id
            try:
                yes_count = await self._capability.decrypt(tally.yes_votes, revealer)
                no_count = await self._capability.decrypt(tally.no_votes, revealer)
            except AccessDeniedError:
                log.error("Reveal failed - revealer lacks decrypt access")
                raise

            result = RevealedResult(
                proposal_id=proposal_id,
                yes_count=yes_count,
                no_count=no_count,
                revealed=True,
                revealed_at=now,
            )
            await self._ledger.record_reveal(proposal.close(now), result)

            await emit_committed(
                self._event_emitter,
                ResultsRevealedEvent(
                    proposal_id=proposal_id,
                    yes_count=yes_count,
                    no_count=no_count,
                    revealed_at=now,
                ),
                log,
            )
            await emit_committed(
                self._event_emitter,
                ProposalClosedEvent(
                    proposal_id=proposal_id,
                    closed_by=caller,
                    closed_at=now,
                ),
                log,
            )

        log.info(
            "Proposal closed and results revealed",
            yes_count=yes_count,
            no_count=no_count,
        )
        return result

    async def get_results(self, proposal_id: int) -> RevealedResult:
        """Return the result of a proposal.

        Before closing, counts read as zero with revealed=False no matter
        how many ballots were cast.

        Raises:
            ProposalNotFoundError: Unknown proposal id.
        """
        if await self._ledger.get_proposal(proposal_id) is None:
            raise ProposalNotFoundError(proposal_id)
        result = await self._ledger.get_result(proposal_id)
        if result is None:
            return RevealedResult.pending(proposal_id)
        return result
