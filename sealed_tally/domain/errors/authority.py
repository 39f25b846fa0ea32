"""Access control errors.

Raised when a caller lacks the role an operation requires, or when a
decryption is requested for a ciphertext the requester was never
granted access to.
"""

from __future__ import annotations

from typing import Any

from sealed_tally.domain.errors.base import BallotEngineError


class UnauthorizedError(BallotEngineError):
    """Raised when a non-authority principal invokes an authority operation.

    HTTP Status: 403 Forbidden

    Attributes:
        caller: Principal that attempted the operation.
        operation: Name of the refused operation.
    """

    problem_type = "urn:sealed-tally:access:unauthorized"
    title = "Unauthorized"
    http_status = 403

    def __init__(self, caller: str, operation: str) -> None:
        self.caller = caller
        self.operation = operation
        super().__init__(
            f"Caller {caller} is not the authority and may not {operation}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"caller": self.caller, "operation": self.operation}


class AccessDeniedError(BallotEngineError):
    """Raised when decryption is requested without a prior grant.

    Every accepted ballot grants the revealer access to the fresh
    counters, so this should never surface during a normal close. If it
    does, it is reported rather than treated as a zero count.

    HTTP Status: 500 Internal Server Error

    Attributes:
        ciphertext_ref: Hex reference of the ciphertext.
        principal: Principal that requested decryption.
    """

    problem_type = "urn:sealed-tally:access:denied"
    title = "Decryption Access Denied"
    http_status = 500

    def __init__(self, ciphertext_ref: str, principal: str) -> None:
        self.ciphertext_ref = ciphertext_ref
        self.principal = principal
        super().__init__(
            f"Principal {principal} holds no decrypt grant for "
            f"ciphertext {ciphertext_ref[:16]}"
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"principal": self.principal}
