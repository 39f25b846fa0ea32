"""Opaque ciphertext handle types.

The engine never sees plaintext inside these values. A handle is a
reference into whatever homomorphic backend is linked in; only that
backend can operate on it or, given a prior grant, decrypt it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class Ciphertext:
    """Handle to an encrypted unsigned integer.

    Attributes:
        handle: Backend-specific reference bytes (never the plaintext).
    """

    handle: bytes

    def __post_init__(self) -> None:
        """Validate handle is non-empty bytes."""
        if not isinstance(self.handle, bytes):
            raise TypeError(
                f"handle must be bytes, got {type(self.handle).__name__}"
            )
        if not self.handle:
            raise ValueError("handle must not be empty")

    @property
    def ref(self) -> str:
        """Hex form of the handle, for logs and access bookkeeping."""
        return self.handle.hex()

    def __repr__(self) -> str:
        return f"Ciphertext({self.ref[:16]}...)"


@dataclass(frozen=True, eq=True)
class EncryptedBool:
    """Handle to an encrypted boolean produced by homomorphic comparison."""

    handle: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.handle, bytes) or not self.handle:
            raise ValueError("handle must be non-empty bytes")

    @property
    def ref(self) -> str:
        return self.handle.hex()

    def __repr__(self) -> str:
        return f"EncryptedBool({self.ref[:16]}...)"
