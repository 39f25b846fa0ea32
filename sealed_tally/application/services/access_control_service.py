"""Access Control Ledger service.

Tracks which principal may invoke which operation and which ciphertexts
a given principal may ask the ciphertext backend to decrypt.

Constraints:
- The authority principal is fixed at construction and never changes
- Only the authority may create or close proposals
- Decrypt grants are idempotent: granting twice equals granting once
- The revealer role and each voter receive grants on every counter
  their ballot produced; nobody else is granted anything
"""

from __future__ import annotations

from structlog import get_logger

from sealed_tally.application.ports.ciphertext_capability import (
    CiphertextCapabilityProtocol,
)
from sealed_tally.domain.errors import UnauthorizedError
from sealed_tally.domain.models.ciphertext import Ciphertext

logger = get_logger(__name__)


class AccessControlService:
    """Centralizes role checks and decrypt-grant bookkeeping.

    The ballot accumulator and the tally revealer both go through this
    service so access logic lives in one place and every grant is
    auditable through `grants_for()`.

    Attributes:
        authority_id: The single privileged principal.
        revealer_id: Principal the tally revealer decrypts as.
    """

    def __init__(
        self,
        authority_id: str,
        capability: CiphertextCapabilityProtocol,
        revealer_id: str = "tally-revealer",
    ) -> None:
        """Initialize the access control ledger.

        Args:
            authority_id: Principal allowed to create and close proposals.
            capability: Ciphertext backend that enforces decrypt grants.
            revealer_id: Principal used by the tally revealer for decryption.

        Raises:
            ValueError: If authority_id or revealer_id is empty, or they coincide.
        """
        if not authority_id:
            raise ValueError("authority_id must not be empty")
        if not revealer_id:
            raise ValueError("revealer_id must not be empty")
        if authority_id == revealer_id:
            raise ValueError("revealer_id must differ from authority_id")
        self._authority_id = authority_id
        self._revealer_id = revealer_id
        self._capability = capability
        # (ciphertext_ref, principal) pairs already granted; never pruned
        self._grants: set[tuple[str, str]] = set()

    @property
    def authority_id(self) -> str:
        return self._authority_id

    @property
    def revealer_id(self) -> str:
        return self._revealer_id

    def is_authority(self, caller: str) -> bool:
        return caller == self._authority_id

    def require_authority(
        self,
        caller: str,
        operation: str = "perform this operation",
    ) -> None:
        """Fail unless caller is the authority.

        Args:
            caller: Pre-authenticated principal invoking the operation.
            operation: Operation name for the error message.

        Raises:
            UnauthorizedError: If caller is not the authority.
        """
        if caller != self._authority_id:
            logger.warning(
                "Authority check failed",
                caller=caller,
                operation=operation,
            )
            raise UnauthorizedError(caller=caller, operation=operation)

    async def grant_decrypt_access(
        self,
        ciphertext: Ciphertext,
        principal: str,
    ) -> bool:
        """Record that `principal` may request decryption of `ciphertext`.

        Idempotent: a repeated grant is a no-op and does not reach the
        ciphertext backend again.

        Args:
            ciphertext: Handle to grant access on.
            principal: Principal receiving the grant.

        Returns:
            True if a new grant was recorded, False if it already existed.
        """
        key = (ciphertext.ref, principal)
        if key in self._grants:
            return False
        await self._capability.grant_access(ciphertext, principal)
        self._grants.add(key)
        logger.debug(
            "Decrypt access granted",
            ciphertext=ciphertext.ref[:16],
            principal=principal,
        )
        return True

    async def grant_to_all(
        self,
        ciphertexts: tuple[Ciphertext, ...],
        principals: tuple[str, ...],
    ) -> None:
        """Grant every principal access to every ciphertext."""
        for ciphertext in ciphertexts:
            for principal in principals:
                await self.grant_decrypt_access(ciphertext, principal)

    def can_decrypt(self, ciphertext: Ciphertext, principal: str) -> bool:
        """Return True if `principal` holds a grant on `ciphertext`."""
        return (ciphertext.ref, principal) in self._grants

    def grants_for(self, principal: str) -> frozenset[str]:
        """Return refs of all ciphertexts `principal` may decrypt."""
        return frozenset(ref for ref, holder in self._grants if holder == principal)
