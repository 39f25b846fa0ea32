"""Ballot Accumulator service.

Folds encrypted yes/no ballots into per-proposal encrypted counters
without ever decrypting an individual ballot.

Preconditions, checked in order (first failure wins):
1. Proposal exists                         -> ProposalNotFoundError
2. Now is inside [start_time, end_time)    -> VotingNotOpenError
3. Caller has not voted on this proposal   -> DuplicateVoteError
4. Ballot proof verifies                   -> InvalidBallotError

Update rule:
    choice  = import_external(ballot, proof)
    is_yes  = equals(choice, Enc(YES))       is_no  = equals(choice, Enc(NO))
    yes_inc = select(is_yes, Enc(1), Enc(0)) no_inc = select(is_no, Enc(1), Enc(0))
    yes     = add(yes, yes_inc)              no     = add(no, no_inc)

The raw imported ciphertext is never added to a counter directly. Each
counter only ever receives an encrypted 0 or 1, and a ballot can match at
most one of YES and NO, so no ballot is counted twice or double-weighted.
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
    DuplicateVoteError,
    InvalidBallotError,
    ProposalNotFoundError,
    VotingNotOpenError,
)
from sealed_tally.domain.events import VoteCastEvent
from sealed_tally.domain.models.ciphertext import Ciphertext
from sealed_tally.domain.models.proposal import VotingWindowStatus
from sealed_tally.domain.models.tally import EncryptedTally, VoteChoice, VoteReceipt

logger = get_logger(__name__)


class BallotAccumulatorService:
    """Service for casting encrypted ballots (single use per participant).

    The whole check-compute-commit sequence runs inside the ledger's
    serialization scope, so two concurrent ballots from the same
    participant cannot both pass the duplicate check.

    Example:
        >>> accumulator = BallotAccumulatorService(
        ...     ledger=ledger,
        ...     capability=capability,
        ...     access_control=access_control,
        ...     event_emitter=emitter,
        ...     time_authority=time_authority,
        ... )
        >>> ballot = capability.encrypt_input(VoteChoice.YES)
        >>> receipt = await accumulator.cast_vote(
        ...     proposal_id=0,
        ...     voter_id="alice",
        ...     encrypted_choice=ballot.ciphertext,
        ...     validity_proof=ballot.proof,
        ... )
    """

    def __init__(
        self,
        ledger: BallotLedgerProtocol,
        capability: CiphertextCapabilityProtocol,
        access_control: AccessControlService,
        event_emitter: TallyEventEmitterPort,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize the ballot accumulator.

        Args:
            ledger: Shared ballot ledger (vote records and tallies).
            capability: Ciphertext backend for import and arithmetic.
            access_control: Grants decrypt access on the new counters.
            event_emitter: Publisher for ballot.vote_cast events.
            time_authority: Clock used for window enforcement.
        """
        self._ledger = ledger
        self._capability = capability
        self._access_control = access_control
        self._event_emitter = event_emitter
        self._time = time_authority

    async def cast_vote(
        self,
        proposal_id: int,
        voter_id: str,
        encrypted_choice: bytes,
        validity_proof: bytes,
    ) -> VoteReceipt:
        """Accept one encrypted ballot and fold it into the counters.

        The operation is all-or-nothing: on any failure neither the vote
        record nor the counters change.

        Args:
            proposal_id: Proposal to vote on.
            voter_id: Pre-authenticated participant casting the ballot.
            encrypted_choice: Client-side ciphertext of 0 (NO) or 1 (YES).
            validity_proof: Proof accompanying the ciphertext.

        Returns:
            VoteReceipt naming the proposal, voter and acceptance time.

        Raises:
            ProposalNotFoundError: Unknown proposal id.
            VotingNotOpenError: Outside the voting window; `status` says
                whether voting has not started or has ended.
            DuplicateVoteError: The participant already voted.
            InvalidBallotError: The ballot failed its validity proof.
        """
        log = logger.bind(proposal_id=proposal_id, voter_id=voter_id)
        log.info("Starting ballot submission")

        async with self._ledger.serialized():
            # Step 1: proposal exists
            proposal = await self._ledger.get_proposal(proposal_id)
            if proposal is None:
                log.warning("Ballot rejected - proposal not found")
                raise ProposalNotFoundError(proposal_id)

            # Step 2: inside [start_time, end_time) and not closed
            now = self._time.now()
            status = proposal.window_status(now)
            if proposal.is_closed:
                status = VotingWindowStatus.ENDED
            if status is not VotingWindowStatus.OPEN:
                log.warning("Ballot rejected - voting not open", status=status.value)
                raise VotingNotOpenError(
                    proposal_id=proposal_id,
                    status=status,
                    start_time=proposal.start_time,
                    end_time=proposal.end_time,
                )

            # Step 3: single use
            if await self._ledger.has_vote_record(proposal_id, voter_id):
                log.warning("Ballot rejected - participant already voted")
                raise DuplicateVoteError(proposal_id=proposal_id, voter_id=voter_id)

            # Step 4: proof check and conversion to an internal handle
            try:
                choice = await self._capability.import_external(
                    encrypted_choice,
                    validity_proof,
                )
            except InvalidBallotError as exc:
                log.warning("Ballot rejected - invalid ballot", reason=exc.reason)
                raise InvalidBallotError(exc.reason, proposal_id=proposal_id) from exc

            tally = await self._ledger.get_tally(proposal_id)
            if tally is None:
                # create_proposal stores proposal and tally together
                raise ProposalNotFoundError(proposal_id)

            updated = await self._accumulate(tally, choice)
            await self._access_control.grant_to_all(
                updated.counters(),
                (self._access_control.revealer_id, voter_id),
            )

            await self._ledger.record_vote(proposal_id, voter_id, updated)
            await emit_committed(
                self._event_emitter,
                VoteCastEvent(proposal_id=proposal_id, voter_id=voter_id, cast_at=now),
                log,
            )

        log.info("Ballot accepted")
        return VoteReceipt(proposal_id=proposal_id, voter_id=voter_id, cast_at=now)

    async def has_voted(self, proposal_id: int, voter_id: str) -> bool:
        """Return True if `voter_id` has an accepted ballot on the proposal.

        Raises:
            ProposalNotFoundError: Unknown proposal id.
        """
        if await self._ledger.get_proposal(proposal_id) is None:
            raise ProposalNotFoundError(proposal_id)
        return await self._ledger.has_vote_record(proposal_id, voter_id)

    async def _accumulate(
        self,
        tally: EncryptedTally,
        choice: Ciphertext,
    ) -> EncryptedTally:
        """Apply the equals/select/add update rule and return the new tally."""
        cap = self._capability

        yes_code = await cap.encrypt_constant(int(VoteChoice.YES))
        no_code = await cap.encrypt_constant(int(VoteChoice.NO))
        one = await cap.encrypt_constant(1)
        zero = await cap.encrypt_constant(0)

        is_yes = await cap.equals(choice, yes_code)
        is_no = await cap.equals(choice, no_code)

        yes_increment = await cap.select(is_yes, one, zero)
        no_increment = await cap.select(is_no, one, zero)

        return EncryptedTally(
            proposal_id=tally.proposal_id,
            yes_votes=await cap.add(tally.yes_votes, yes_increment),
            no_votes=await cap.add(tally.no_votes, no_increment),
        )
