"""Controllable time authority.

Time stands still unless advanced, which makes voting windows
deterministic in tests and lets the CLI demo skip ahead without waiting.

    >>> clock = TimeAuthorityStub()
    >>> clock.advance(seconds=61)
    >>> clock.advance(timedelta(hours=1))
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sealed_tally.application.ports.time_authority import TimeAuthorityProtocol

# DEV_MODE_WATERMARK per dev stub convention
DEV_MODE_WATERMARK: str = "DEV_STUB:TimeAuthorityStub:v1"

DEFAULT_START: datetime = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class TimeAuthorityStub(TimeAuthorityProtocol):
    """Frozen clock that moves only through `advance()` or `set_time()`.

    Attributes:
        _current_time: The controlled current time.
        _monotonic: Monotonic reading, moved in step with advances.
    """

    def __init__(self, frozen_at: datetime | None = None) -> None:
        """Initialize the clock.

        Args:
            frozen_at: Starting time. Defaults to 2026-01-01T00:00:00 UTC.
                Naive datetimes are taken as UTC.
        """
        if frozen_at is None:
            frozen_at = DEFAULT_START
        if frozen_at.tzinfo is None:
            frozen_at = frozen_at.replace(tzinfo=timezone.utc)
        self._current_time = frozen_at
        self._monotonic = 0.0

    def now(self) -> datetime:
        return self._current_time

    def utcnow(self) -> datetime:
        return self._current_time

    def monotonic(self) -> float:
        return self._monotonic

    def advance(
        self,
        delta: timedelta | None = None,
        *,
        seconds: float = 0.0,
    ) -> None:
        """Move time forward.

        Raises:
            ValueError: If the total advance is negative.
        """
        step = (delta or timedelta()) + timedelta(seconds=seconds)
        if step < timedelta():
            raise ValueError(f"Cannot advance time backwards: {step}")
        self._current_time += step
        self._monotonic += step.total_seconds()

    def set_time(self, new_time: datetime) -> None:
        """Jump to an arbitrary time. The monotonic clock is unaffected."""
        if new_time.tzinfo is None:
            new_time = new_time.replace(tzinfo=timezone.utc)
        self._current_time = new_time
