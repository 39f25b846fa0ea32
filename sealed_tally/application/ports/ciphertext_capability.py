"""Ciphertext Capability port - the homomorphic encryption backend.

Defines the fixed capability set the tallying engine consumes. The
engine treats ciphertexts as opaque handles and never implements the
underlying cryptosystem; any concrete homomorphic library is linked in
behind this interface.

Constraints:
- Operations never reveal plaintext to the caller
- import_external MUST reject a ciphertext whose proof does not verify
- decrypt MUST refuse a requester that holds no grant for the ciphertext
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sealed_tally.domain.models.ciphertext import Ciphertext, EncryptedBool


class CiphertextCapabilityProtocol(ABC):
    """Abstract protocol for homomorphic encrypted-integer operations.

    All methods are awaitable: a deployment may evaluate them on a
    coprocessor or remote service. Callers hold the ledger's
    serialization scope while awaiting so operations stay atomic.

    Production implementations may include:
    - An FHE coprocessor client
    - A local TFHE library binding

    Development/Testing:
    - CiphertextCapabilityStub: mock backend with plaintext shadow table
    """

    @abstractmethod
    async def encrypt_zero(self) -> Ciphertext:
        """Return a fresh encryption of 0."""
        ...

    @abstractmethod
    async def encrypt_constant(self, value: int) -> Ciphertext:
        """Trivially encrypt a public constant.

        Args:
            value: Non-negative public integer.

        Returns:
            Ciphertext usable as an operand in add/equals/select.
        """
        ...

    @abstractmethod
    async def add(self, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        """Homomorphically add two encrypted integers."""
        ...

    @abstractmethod
    async def equals(self, lhs: Ciphertext, rhs: Ciphertext) -> EncryptedBool:
        """Homomorphically compare two encrypted integers for equality."""
        ...

    @abstractmethod
    async def select(
        self,
        condition: EncryptedBool,
        if_true: Ciphertext,
        if_false: Ciphertext,
    ) -> Ciphertext:
        """Homomorphic conditional: if_true where condition holds, else if_false."""
        ...

    @abstractmethod
    async def import_external(
        self,
        ciphertext_bytes: bytes,
        proof_bytes: bytes,
    ) -> Ciphertext:
        """Convert an externally supplied ciphertext into an internal handle.

        Args:
            ciphertext_bytes: Serialized ciphertext produced client-side.
            proof_bytes: Validity proof attesting well-formedness and domain.

        Returns:
            Internal ciphertext handle.

        Raises:
            InvalidBallotError: If the bytes are malformed or the proof
                does not verify.
        """
        ...

    @abstractmethod
    async def grant_access(self, ciphertext: Ciphertext, principal: str) -> None:
        """Allow `principal` to request decryption of `ciphertext`."""
        ...

    @abstractmethod
    async def decrypt(self, ciphertext: Ciphertext, requester: str) -> int:
        """Decrypt a ciphertext on behalf of `requester`.

        Raises:
            AccessDeniedError: If `requester` was never granted access.
        """
        ...
