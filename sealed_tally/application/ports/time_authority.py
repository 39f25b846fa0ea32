"""Time Authority Protocol - interface for the engine's clock source.

All services that need "current time" MUST inject a TimeAuthorityProtocol
implementation instead of calling datetime.now() directly. Voting windows,
schedule validation and closing all depend on one consistent clock.

Benefits:
1. **Consistency**: All services read time from a single authority
2. **Testability**: Tests inject TimeAuthorityStub for deterministic windows
3. **Auditability**: Timestamps on events come from one source
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    Example usage:
        class MyService:
            def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
                self._time = time_authority

            def process(self) -> None:
                now = self._time.now()  # NOT datetime.now()
                ...

    For production:
        Use TimeAuthorityService from sealed_tally.application.services

    For testing and demos:
        Use TimeAuthorityStub from sealed_tally.infrastructure.stubs
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC)."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time.

        Note:
            This should always return a timezone-aware datetime in UTC.
        """
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value for measuring elapsed time.

        Note:
            Use this for measuring elapsed time, not for timestamps.
            Only differences between values are meaningful.
        """
        ...
