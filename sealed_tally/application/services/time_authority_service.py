"""Time Authority Service - production clock for the tallying engine.

Wraps the system wall clock and monotonic clock behind
TimeAuthorityProtocol so that every service reads time from one source.
"""

import time
from datetime import datetime, timezone

from sealed_tally.application.ports.time_authority import TimeAuthorityProtocol


class TimeAuthorityService(TimeAuthorityProtocol):
    """System-clock implementation of TimeAuthorityProtocol.

    Example:
        >>> authority = TimeAuthorityService()
        >>> authority.now().tzinfo is not None
        True
    """

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        return datetime.now(timezone.utc)

    def utcnow(self) -> datetime:
        """Return the current UTC time (same as now())."""
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        """Return the process monotonic clock in seconds."""
        return time.monotonic()
