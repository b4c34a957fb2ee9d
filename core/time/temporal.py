"""
Roombook Core Time — Temporal Helpers
=====================================
Pure functions for time interval logic.
All functions take explicit datetime arguments — no hidden clock access.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


def require_aware(value: Optional[datetime], field_name: str, *, optional: bool = False) -> None:
    """Raise if value is not a timezone-aware datetime."""
    if value is None:
        if optional:
            return
        raise ValueError(f"{field_name} is required.")
    if not isinstance(value, datetime):
        raise ValueError(f"{field_name} must be a datetime.")
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError(f"{field_name} must be timezone-aware.")


# ══════════════════════════════════════════════════════════════
# TIME WINDOW — Closed interval [start, end]
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TimeWindow:
    """
    A closed time interval [start, end].

    Invariant: start <= end (enforced at construction).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"TimeWindow start ({self.start}) must be <= end ({self.end})."
            )

    @classmethod
    def around(cls, anchor: datetime, before: timedelta, after: timedelta) -> "TimeWindow":
        """[anchor - before, anchor + after]"""
        return cls(start=anchor - before, end=anchor + after)

    def contains(self, dt: datetime) -> bool:
        """Check if datetime falls within window (inclusive)."""
        return self.start <= dt <= self.end

    def duration(self) -> timedelta:
        return self.end - self.start


def half_open_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Overlap of [start_a, end_a) and [start_b, end_b); touching ends do not overlap."""
    return start_a < end_b and start_b < end_a
