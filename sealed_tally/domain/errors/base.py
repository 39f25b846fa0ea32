"""Common base for ballot engine errors.

Every error kind carries a stable problem type URN, a title and an HTTP
status so front ends can render specific guidance ("voting has not
started yet" vs "you already voted") instead of a generic failure.
"""

from __future__ import annotations

from typing import Any, ClassVar

from sealed_tally.domain.exceptions import SealedTallyError


class BallotEngineError(SealedTallyError):
    """Base error for all precondition violations in the tallying engine.

    Raising any subclass aborts the operation before state is mutated.
    Subclasses set the class attributes and may extend
    `problem_extensions()` with error-specific fields.
    """

    problem_type: ClassVar[str] = "urn:sealed-tally:error"
    title: ClassVar[str] = "Ballot Engine Error"
    http_status: ClassVar[int] = 400

    def problem_extensions(self) -> dict[str, Any]:
        """Return error-specific RFC 7807 extension members."""
        return {}

    def to_rfc7807_dict(self) -> dict[str, Any]:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary with type, title, status, detail and extensions.
        """
        result: dict[str, Any] = {
            "type": self.problem_type,
            "title": self.title,
            "status": self.http_status,
            "detail": str(self),
        }
        result.update(self.problem_extensions())
        return result
