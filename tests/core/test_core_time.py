"""
Tests for core.time — Clock protocol and temporal helpers.
"""

import pytest
from datetime import datetime, timezone, timedelta

from core.time.clock import FixedClock, SystemClock
from core.time.temporal import TimeWindow, half_open_overlap, require_aware


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_utc_datetime(self):
        clock = SystemClock()
        dt = clock.now_utc()
        assert dt.tzinfo is not None
        assert dt.tzinfo == timezone.utc

    def test_time_advances(self):
        clock = SystemClock()
        t1 = clock.now_utc()
        t2 = clock.now_utc()
        assert t2 >= t1


class TestFixedClock:
    def test_returns_fixed_time(self):
        fixed = datetime(2026, 3, 2, 10, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        assert clock.now_utc() == fixed
        assert clock.now_utc() == fixed  # Same every time

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2026, 1, 1))

    def test_advance_seconds(self):
        fixed = datetime(2026, 3, 2, 10, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        clock.advance(60)
        assert clock.now_utc() == fixed + timedelta(seconds=60)

    def test_advance_timedelta(self):
        fixed = datetime(2026, 3, 2, 10, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        clock.advance(timedelta(minutes=9))
        assert clock.now_utc() == datetime(2026, 3, 2, 10, 9, tzinfo=timezone.utc)

    def test_set_rejects_naive(self):
        clock = FixedClock(datetime(2026, 3, 2, tzinfo=timezone.utc))
        with pytest.raises(ValueError):
            clock.set(datetime(2026, 3, 3))


# ── require_aware ────────────────────────────────────────────

class TestRequireAware:
    def test_accepts_aware(self):
        require_aware(datetime(2026, 1, 1, tzinfo=timezone.utc), "at")

    def test_rejects_naive(self):
        with pytest.raises(ValueError, match="at must be timezone-aware"):
            require_aware(datetime(2026, 1, 1), "at")

    def test_rejects_non_datetime(self):
        with pytest.raises(ValueError, match="must be a datetime"):
            require_aware("2026-01-01", "at")

    def test_none_only_when_optional(self):
        require_aware(None, "at", optional=True)
        with pytest.raises(ValueError, match="required"):
            require_aware(None, "at")


# ── TimeWindow Tests ─────────────────────────────────────────

class TestTimeWindow:
    def test_contains_is_inclusive(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        end = datetime(2026, 12, 31, tzinfo=timezone.utc)
        window = TimeWindow(start=start, end=end)

        assert window.contains(datetime(2026, 6, 15, tzinfo=timezone.utc))
        assert window.contains(start)
        assert window.contains(end)
        assert not window.contains(datetime(2025, 12, 31, tzinfo=timezone.utc))

    def test_around(self):
        anchor = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
        window = TimeWindow.around(anchor, timedelta(minutes=10), timedelta(minutes=10))
        assert window.start == datetime(2026, 3, 2, 9, 50, tzinfo=timezone.utc)
        assert window.end == datetime(2026, 3, 2, 10, 10, tzinfo=timezone.utc)
        assert window.duration() == timedelta(minutes=20)

    def test_rejects_start_after_end(self):
        with pytest.raises(ValueError, match="start"):
            TimeWindow(
                start=datetime(2026, 12, 31, tzinfo=timezone.utc),
                end=datetime(2026, 1, 1, tzinfo=timezone.utc),
            )


class TestHalfOpenOverlap:
    T10 = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
    T11 = datetime(2026, 3, 2, 11, 0, tzinfo=timezone.utc)
    T12 = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)

    def test_touching_slots_do_not_overlap(self):
        assert not half_open_overlap(self.T10, self.T11, self.T11, self.T12)

    def test_nested_slots_overlap(self):
        inner_start = self.T10 + timedelta(minutes=15)
        assert half_open_overlap(self.T10, self.T12, inner_start, self.T11)
