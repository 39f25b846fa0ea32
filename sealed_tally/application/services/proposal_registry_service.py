"""Proposal Registry service.

Creates proposals and serves their metadata with a lifecycle state
derived from the clock.

Constraints:
- Only the authority may create proposals
- start_time must be strictly after the current time
- duration must be strictly positive
- Ids are sequential from 0; count() never decreases
- Every new proposal starts with encrypted-zero counters the revealer may decrypt
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

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
from sealed_tally.domain.errors import InvalidScheduleError, ProposalNotFoundError
from sealed_tally.domain.events import ProposalCreatedEvent
from sealed_tally.domain.models.proposal import Proposal, ProposalView
from sealed_tally.domain.models.tally import EncryptedTally

logger = get_logger(__name__)


class ProposalRegistryService:
    """Service that owns proposal creation and lookup.

    Example:
        >>> registry = ProposalRegistryService(
        ...     ledger=ledger,
        ...     capability=capability,
        ...     access_control=access_control,
        ...     event_emitter=emitter,
        ...     time_authority=time_authority,
        ... )
        >>> proposal_id = await registry.create_proposal(
        ...     caller="authority",
        ...     title="Adopt the new budget?",
        ...     description="Yes/no on the 2027 budget",
        ...     start_time=now + timedelta(seconds=60),
        ...     duration_seconds=3600,
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
        """Initialize the proposal registry.

        Args:
            ledger: Shared ballot ledger.
            capability: Ciphertext backend used to create the zero counters.
            access_control: Role checks and decrypt grants.
            event_emitter: Publisher for proposal.created events.
            time_authority: Clock used for schedule validation and state.
        """
        self._ledger = ledger
        self._capability = capability
        self._access_control = access_control
        self._event_emitter = event_emitter
        self._time = time_authority

    async def create_proposal(
        self,
        caller: str,
        title: str,
        description: str,
        start_time: datetime,
        duration_seconds: int,
    ) -> int:
        """Register a new proposal and initialize its encrypted tally.

        Args:
            caller: Principal invoking the operation.
            title: Proposal title.
            description: Proposal description.
            start_time: When voting opens. Naive datetimes are taken as UTC.
            duration_seconds: Length of the voting window in seconds.

        Returns:
            The id assigned to the new proposal.

        Raises:
            UnauthorizedError: If caller is not the authority.
            InvalidScheduleError: If start_time is not in the future or
                duration_seconds is not positive or overflows the calendar.
        """
        log = logger.bind(caller=caller, title=title)

        self._access_control.require_authority(caller, "create proposals")

        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)

        now = self._time.now()
        if start_time <= now:
            log.warning(
                "Proposal rejected - start time not in the future",
                start_time=start_time.isoformat(),
                now=now.isoformat(),
            )
            raise InvalidScheduleError(
                "Start time must be in the future",
                start_time=start_time,
                duration_seconds=duration_seconds,
            )
        if duration_seconds <= 0:
            log.warning(
                "Proposal rejected - non-positive duration",
                duration_seconds=duration_seconds,
            )
            raise InvalidScheduleError(
                "Duration must be positive",
                start_time=start_time,
                duration_seconds=duration_seconds,
            )

        try:
            end_time = start_time + timedelta(seconds=duration_seconds)
        except OverflowError:
            log.warning(
                "Proposal rejected - duration out of range",
                duration_seconds=duration_seconds,
            )
            raise InvalidScheduleError(
                "Duration out of range",
                start_time=start_time,
                duration_seconds=duration_seconds,
            ) from None

        async with self._ledger.serialized():
            proposal_id = await self._ledger.next_proposal_id()
            yes_votes = await self._capability.encrypt_zero()
            no_votes = await self._capability.encrypt_zero()
            await self._access_control.grant_to_all(
                (yes_votes, no_votes),
                (self._access_control.revealer_id,),
            )

            proposal = Proposal(
                proposal_id=proposal_id,
                title=title,
                description=description,
                start_time=start_time,
                end_time=end_time,
                created_by=caller,
                created_at=now,
            )
            await self._ledger.create_proposal(
                proposal,
                EncryptedTally(
                    proposal_id=proposal_id,
                    yes_votes=yes_votes,
                    no_votes=no_votes,
                ),
            )
            await emit_committed(
                self._event_emitter,
                ProposalCreatedEvent(
                    proposal_id=proposal_id,
                    title=title,
                    start_time=start_time,
                    end_time=end_time,
                ),
                log,
            )

        log.info(
            "Proposal created",
            proposal_id=proposal_id,
            start_time=start_time.isoformat(),
            end_time=end_time.isoformat(),
        )
        return proposal_id

    async def get_proposal(self, proposal_id: int) -> ProposalView:
        """Return proposal metadata with its current lifecycle state.

        Raises:
            ProposalNotFoundError: If the id was never assigned.
        """
        proposal = await self._ledger.get_proposal(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(proposal_id)
        return ProposalView.at(proposal, self._time.now())

    async def list_proposals(self) -> list[ProposalView]:
        """Return views of every proposal in id order."""
        now = self._time.now()
        return [
            ProposalView.at(proposal, now)
            for proposal in await self._ledger.list_proposals()
        ]

    async def count(self) -> int:
        """Return the number of proposals created so far."""
        return await self._ledger.count_proposals()
