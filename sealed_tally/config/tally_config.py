"""Tallying engine configuration.

Environment Variables:
- SEALED_TALLY_AUTHORITY_ID: Principal allowed to create and close proposals
  (required)
- SEALED_TALLY_REVEALER_ID: Principal the tally revealer decrypts as
  (default: tally-revealer)
- SEALED_TALLY_ENVIRONMENT: production | development (default: production)
- SEALED_TALLY_STUB_KEY: Hex key shared by the development ciphertext
  backend and `sealed-tally encrypt-ballot` (default: random per process)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

AUTHORITY_ID_ENV = "SEALED_TALLY_AUTHORITY_ID"
REVEALER_ID_ENV = "SEALED_TALLY_REVEALER_ID"
ENVIRONMENT_ENV = "SEALED_TALLY_ENVIRONMENT"
STUB_KEY_ENV = "SEALED_TALLY_STUB_KEY"

DEFAULT_REVEALER_ID = "tally-revealer"
VALID_ENVIRONMENTS: frozenset[str] = frozenset({"production", "development"})
MIN_STUB_KEY_BYTES = 16


@dataclass(frozen=True)
class TallyConfig:
    """Deployment configuration for one engine instance.

    Attributes:
        authority_id: The single privileged principal, fixed for the
            lifetime of the engine.
        revealer_id: Principal granted decrypt access to every counter.
        environment: Selects the log renderer (JSON vs console).
        stub_key: Key for the development ciphertext backend. Clients
            holding the same key can build ballots it accepts.
    """

    authority_id: str
    revealer_id: str = DEFAULT_REVEALER_ID
    environment: str = "production"
    stub_key: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.authority_id.strip():
            raise ValueError("authority_id must not be empty")
        if not self.revealer_id.strip():
            raise ValueError("revealer_id must not be empty")
        if self.authority_id == self.revealer_id:
            raise ValueError(
                f"revealer_id must differ from authority_id ({self.authority_id})"
            )
        if self.environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(VALID_ENVIRONMENTS)}, "
                f"got {self.environment!r}"
            )
        if self.stub_key is not None and len(self.stub_key) < MIN_STUB_KEY_BYTES:
            raise ValueError(
                f"stub_key must be at least {MIN_STUB_KEY_BYTES} bytes"
            )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_environment(cls) -> TallyConfig:
        """Create config from environment variables.

        Raises:
            ValueError: If SEALED_TALLY_AUTHORITY_ID is unset or a value
                fails validation.
        """
        authority_id = os.environ.get(AUTHORITY_ID_ENV)
        if not authority_id:
            raise ValueError(f"{AUTHORITY_ID_ENV} must be set")
        return cls(
            authority_id=authority_id,
            revealer_id=os.environ.get(REVEALER_ID_ENV, DEFAULT_REVEALER_ID),
            environment=os.environ.get(ENVIRONMENT_ENV, "production").lower(),
            stub_key=parse_stub_key(os.environ.get(STUB_KEY_ENV)),
        )


def parse_stub_key(value: str | None) -> bytes | None:
    """Decode a hex stub key; empty or unset means no shared key.

    Raises:
        ValueError: If the value is not valid hex.
    """
    if not value:
        return None
    try:
        return bytes.fromhex(value.strip())
    except ValueError:
        raise ValueError(f"{STUB_KEY_ENV} must be hex encoded") from None
