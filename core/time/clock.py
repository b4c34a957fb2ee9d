"""
Roombook Core Time — Explicit Clock Protocol
============================================
Doctrine: NO datetime.now() inside policy or lifecycle logic.
"now" is always an argument. Infrastructure that has to produce it
(HTTP boundary, scheduler) asks an injected Clock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol, Union


class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock — returns a fixed timestamp until advanced.

    Usage:
        clock = FixedClock(datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc))
        clock.advance(timedelta(minutes=5))
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, delta: Union[timedelta, float]) -> None:
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self._fixed_dt = self._fixed_dt + delta

    def set(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt
