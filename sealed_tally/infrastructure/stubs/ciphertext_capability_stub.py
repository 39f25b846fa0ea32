"""Ciphertext capability stub implementation.

Mock homomorphic backend for development and testing. Ciphertext
handles are opaque BLAKE3 digests; the plaintext behind each handle is
kept in a private shadow table that only the stub can read. This mirrors
the "mock mode" of FHE toolchains: the engine's behaviour is exercised
end to end while the cryptography is simulated.

Client-side ballots are produced with `encrypt_input()`. The ciphertext
is the value masked with an HMAC-derived pad; the validity proof is an
HMAC over the ciphertext and a domain flag, standing in for a
zero-knowledge range proof. Without the stub key a proof cannot be forged.

WARNING: This is a development stub. Not for production use.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass

import blake3

from sealed_tally.application.ports.ciphertext_capability import (
    CiphertextCapabilityProtocol,
)
from sealed_tally.domain.errors import AccessDeniedError, InvalidBallotError
from sealed_tally.domain.models.ciphertext import Ciphertext, EncryptedBool

# DEV_MODE_WATERMARK per dev stub convention
DEV_MODE_WATERMARK: str = "DEV_STUB:CiphertextCapabilityStub:v1"

# Wire layout of an external ciphertext: version | nonce | masked value
_WIRE_VERSION: bytes = b"\x01"
_NONCE_SIZE: int = 16
_VALUE_SIZE: int = 4
_CIPHERTEXT_SIZE: int = 1 + _NONCE_SIZE + _VALUE_SIZE

# Proof layout: domain flag | HMAC-SHA256 tag
_DOMAIN_OK: bytes = b"\x01"
_DOMAIN_UNBOUNDED: bytes = b"\x00"
_PROOF_SIZE: int = 1 + hashlib.sha256().digest_size

# Encrypted integers behave like euint32: arithmetic wraps
_MODULUS: int = 2**32

# Values a proof may attest as in-domain (NO, YES)
_BALLOT_DOMAIN: frozenset[int] = frozenset({0, 1})


@dataclass(frozen=True, eq=True)
class EncryptedInput:
    """Client-side ballot: serialized ciphertext plus validity proof.

    Attributes:
        ciphertext: Bytes submitted as the encrypted choice.
        proof: Bytes submitted as the validity proof.
    """

    ciphertext: bytes
    proof: bytes


class CiphertextCapabilityStub(CiphertextCapabilityProtocol):
    """In-memory mock of the homomorphic ciphertext capability.

    Handles are never released. Every operation adds to the shadow tables,
    including the intermediates of a cast (imported ballot, constants,
    comparison and select results) that nothing references afterwards.
    Superseded counters are kept on purpose so voters can still decrypt
    the counters their ballot produced. Memory therefore grows with the
    number of ballots; call `clear()` between independent runs.

    Attributes:
        _values: handle -> plaintext integer shadow table.
        _bools: handle -> plaintext boolean shadow table.
        _acl: handle -> principals allowed to decrypt.
        _enforce_proof_domain: Reject proofs that do not attest {0, 1}.
    """

    def __init__(
        self,
        secret_key: bytes | None = None,
        *,
        enforce_proof_domain: bool = True,
    ) -> None:
        """Initialize the stub backend.

        Args:
            secret_key: HMAC key shared with `encrypt_input`. Random if omitted.
            enforce_proof_domain: When False, proofs are only checked for
                authenticity, not for attesting a {0, 1} value. Simulates a
                proof system that bounds the domain only by protocol.
        """
        self._key = secret_key if secret_key is not None else secrets.token_bytes(32)
        self._enforce_proof_domain = enforce_proof_domain
        self._values: dict[bytes, int] = {}
        self._bools: dict[bytes, bool] = {}
        self._acl: dict[bytes, set[str]] = {}
        self._sequence: int = 0

    # =========================================================================
    # Client-side helpers
    # =========================================================================

    def encrypt_input(self, value: int) -> EncryptedInput:
        """Encrypt a plaintext ballot the way a participant's client would.

        Args:
            value: 0 for NO, 1 for YES. Other 32-bit values are encrypted
                too, but their proof does not attest the ballot domain.

        Returns:
            EncryptedInput ready for `cast_vote`.

        Raises:
            ValueError: If value does not fit an unsigned 32-bit integer.
        """
        value = int(value)
        if not 0 <= value < _MODULUS:
            raise ValueError(f"value must fit in 32 bits, got {value}")

        nonce = secrets.token_bytes(_NONCE_SIZE)
        masked = value ^ self._pad(nonce)
        ciphertext = _WIRE_VERSION + nonce + masked.to_bytes(_VALUE_SIZE, "big")
        flag = _DOMAIN_OK if value in _BALLOT_DOMAIN else _DOMAIN_UNBOUNDED
        return EncryptedInput(
            ciphertext=ciphertext,
            proof=flag + self._proof_tag(ciphertext, flag),
        )

    # =========================================================================
    # CiphertextCapabilityProtocol Implementation
    # =========================================================================

    async def encrypt_zero(self) -> Ciphertext:
        return self._store_value(0)

    async def encrypt_constant(self, value: int) -> Ciphertext:
        if value < 0:
            raise ValueError(f"constant must be non-negative, got {value}")
        return self._store_value(value)

    async def add(self, lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
        return self._store_value(self._value_of(lhs) + self._value_of(rhs))

    async def equals(self, lhs: Ciphertext, rhs: Ciphertext) -> EncryptedBool:
        handle = self._new_handle(b"ebool")
        self._bools[handle] = self._value_of(lhs) == self._value_of(rhs)
        return EncryptedBool(handle)

    async def select(
        self,
        condition: EncryptedBool,
        if_true: Ciphertext,
        if_false: Ciphertext,
    ) -> Ciphertext:
        try:
            chosen = if_true if self._bools[condition.handle] else if_false
        except KeyError:
            raise ValueError(f"Unknown encrypted boolean: {condition!r}") from None
        return self._store_value(self._value_of(chosen))

    async def import_external(
        self,
        ciphertext_bytes: bytes,
        proof_bytes: bytes,
    ) -> Ciphertext:
        """Verify the proof and register the ballot under a fresh handle.

        Raises:
            InvalidBallotError: Malformed bytes, forged or mismatched proof,
                or (when enforcing) a proof not attesting {0, 1}.
        """
        if (
            len(ciphertext_bytes) != _CIPHERTEXT_SIZE
            or ciphertext_bytes[:1] != _WIRE_VERSION
        ):
            raise InvalidBallotError("malformed ciphertext")
        if len(proof_bytes) != _PROOF_SIZE:
            raise InvalidBallotError("malformed validity proof")

        flag, tag = proof_bytes[:1], proof_bytes[1:]
        if not hmac.compare_digest(tag, self._proof_tag(ciphertext_bytes, flag)):
            raise InvalidBallotError("validity proof does not verify")
        if self._enforce_proof_domain and flag != _DOMAIN_OK:
            raise InvalidBallotError("validity proof does not attest a value in {0, 1}")

        nonce = ciphertext_bytes[1 : 1 + _NONCE_SIZE]
        masked = int.from_bytes(ciphertext_bytes[1 + _NONCE_SIZE :], "big")
        return self._store_value(masked ^ self._pad(nonce))

    async def grant_access(self, ciphertext: Ciphertext, principal: str) -> None:
        self._value_of(ciphertext)
        self._acl.setdefault(ciphertext.handle, set()).add(principal)

    async def decrypt(self, ciphertext: Ciphertext, requester: str) -> int:
        """Return the plaintext if `requester` holds a grant.

        Raises:
            AccessDeniedError: No prior grant for requester.
        """
        value = self._value_of(ciphertext)
        if requester not in self._acl.get(ciphertext.handle, set()):
            raise AccessDeniedError(ciphertext.ref, requester)
        return value

    # =========================================================================
    # Inspection Methods (for test assertions)
    # =========================================================================

    def peek(self, ciphertext: Ciphertext) -> int:
        """Return the plaintext behind a handle, bypassing the ACL.

        Test-only: lets assertions check counters without a grant.
        """
        return self._value_of(ciphertext)

    def allowed_principals(self, ciphertext: Ciphertext) -> frozenset[str]:
        return frozenset(self._acl.get(ciphertext.handle, set()))

    def handle_count(self) -> int:
        """Return how many handles the shadow tables hold."""
        return len(self._values) + len(self._bools)

    def clear(self) -> None:
        """Drop every handle and grant. Outstanding handles become unknown."""
        self._values.clear()
        self._bools.clear()
        self._acl.clear()

    # =========================================================================
    # Internals
    # =========================================================================

    def _new_handle(self, kind: bytes) -> bytes:
        self._sequence += 1
        hasher = blake3.blake3(kind)
        hasher.update(self._sequence.to_bytes(8, "big"))
        hasher.update(secrets.token_bytes(16))
        return hasher.digest()

    def _store_value(self, value: int) -> Ciphertext:
        handle = self._new_handle(b"euint32")
        self._values[handle] = value % _MODULUS
        return Ciphertext(handle)

    def _value_of(self, ciphertext: Ciphertext) -> int:
        try:
            return self._values[ciphertext.handle]
        except KeyError:
            raise ValueError(f"Unknown ciphertext handle: {ciphertext!r}") from None

    def _pad(self, nonce: bytes) -> int:
        digest = hmac.new(self._key, b"pad" + nonce, hashlib.sha256).digest()
        return int.from_bytes(digest[:_VALUE_SIZE], "big")

    def _proof_tag(self, ciphertext: bytes, flag: bytes) -> bytes:
        message = b"proof" + ciphertext + flag
        return hmac.new(self._key, message, hashlib.sha256).digest()
