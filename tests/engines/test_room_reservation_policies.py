"""
Tests for engines.room_reservation.policies — time window predicates.

Reservation under test: 10:00–11:00 UTC, confirmed, not checked in.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.config.rules import ReservationRules
from engines.room_reservation import policies
from engines.room_reservation.models import Reservation, ReservationStatus

START = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
END = datetime(2026, 3, 2, 11, 0, tzinfo=timezone.utc)
CREATED = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


def _reservation(**overrides) -> Reservation:
    fields = dict(
        reservation_id="r-1",
        room_id="room-1",
        user_id="u-1",
        title="Study group",
        start_time=START,
        end_time=END,
        status=ReservationStatus.CONFIRMED,
        created_at=CREATED,
    )
    fields.update(overrides)
    return Reservation(**fields)


def _at(minutes: float) -> datetime:
    return START + timedelta(minutes=minutes)


# ══════════════════════════════════════════════════════════════
# CHECK-IN
# ══════════════════════════════════════════════════════════════

class TestCanCheckIn:
    @pytest.mark.parametrize("offset, expected", [
        (-10, True),
        (-10 - 1 / 60, False),
        (10, True),
        (10 + 1 / 60, False),
        (0, True),
        (-9, True),
    ])
    def test_boundaries(self, offset, expected):
        assert policies.can_check_in(_at(offset), _reservation()) is expected

    def test_not_twice(self):
        checked_in = _reservation(check_in_at=_at(-5))
        assert policies.can_check_in(_at(0), checked_in) is False

    def test_pending_cannot_check_in(self):
        pending = _reservation(status=ReservationStatus.PENDING)
        assert policies.can_check_in(_at(0), pending) is False

    def test_no_show_cannot_check_in(self):
        no_show = _reservation(is_no_show=True, no_show_report_count=1)
        assert policies.can_check_in(_at(0), no_show) is False

    def test_window_follows_rules(self):
        rules = ReservationRules(check_in_before=timedelta(minutes=15))
        assert policies.can_check_in(_at(-15), _reservation(), rules) is True
        assert policies.can_check_in(_at(-15), _reservation()) is False


class TestCanLateCheckIn:
    def test_disabled_by_default(self):
        assert policies.can_late_check_in(_at(15), _reservation()) is False

    def test_grace_window(self):
        rules = ReservationRules(late_check_in_grace=timedelta(minutes=20))
        assert policies.can_late_check_in(_at(10), _reservation(), rules) is False
        assert policies.can_late_check_in(_at(10.5), _reservation(), rules) is True
        assert policies.can_late_check_in(_at(30), _reservation(), rules) is True
        assert policies.can_late_check_in(_at(30.5), _reservation(), rules) is False


# ══════════════════════════════════════════════════════════════
# EARLY RETURN
# ══════════════════════════════════════════════════════════════

class TestCanEarlyReturn:
    def test_between_start_and_end(self):
        r = _reservation(check_in_at=_at(-9))
        assert policies.can_early_return(_at(0), r) is True
        assert policies.can_early_return(_at(30), r) is True

    def test_not_at_or_after_end(self):
        r = _reservation(check_in_at=_at(-9))
        assert policies.can_early_return(END, r) is False

    def test_not_before_start(self):
        r = _reservation(check_in_at=_at(-9))
        assert policies.can_early_return(_at(-1), r) is False

    def test_requires_check_in(self):
        assert policies.can_early_return(_at(30), _reservation()) is False

    @pytest.mark.parametrize("status", [ReservationStatus.FINISHED, ReservationStatus.CANCELLED])
    def test_not_in_terminal_status(self, status):
        r = _reservation(check_in_at=_at(-9), status=status)
        assert policies.can_early_return(_at(30), r) is False


# ══════════════════════════════════════════════════════════════
# CANCEL
# ══════════════════════════════════════════════════════════════

class TestCanCancel:
    def test_exactly_thirty_minutes_before_succeeds(self):
        assert policies.can_cancel(_at(-30), _reservation()) is True

    def test_twenty_nine_fifty_nine_before_fails(self):
        assert policies.can_cancel(_at(-30) + timedelta(seconds=1), _reservation()) is False

    def test_pending_can_cancel(self):
        pending = _reservation(status=ReservationStatus.PENDING)
        assert policies.can_cancel(_at(-60), pending) is True

    @pytest.mark.parametrize("status", [ReservationStatus.FINISHED, ReservationStatus.CANCELLED])
    def test_terminal_cannot_cancel(self, status):
        assert policies.can_cancel(_at(-60), _reservation(status=status)) is False

    def test_no_show_cannot_cancel(self):
        r = _reservation(is_no_show=True, no_show_report_count=1)
        assert policies.can_cancel(_at(-60), r) is False

    def test_deadline(self):
        assert policies.cancellation_deadline(_reservation()) == _at(-30)


class TestOwnerDelete:
    @pytest.mark.parametrize("offset, expected", [
        (-60, True),
        (-30, True),
        (-29, False),
        (25, False),
    ])
    def test_open_reservation_follows_cancel_cutoff(self, offset, expected):
        assert policies.can_owner_delete(_at(offset), _reservation()) is expected

    @pytest.mark.parametrize("status", [ReservationStatus.FINISHED, ReservationStatus.CANCELLED])
    def test_closed_reservation_always(self, status):
        assert policies.can_owner_delete(_at(25), _reservation(status=status)) is True

    def test_no_show_kept_open_is_not_deletable(self):
        r = _reservation(is_no_show=True, no_show_report_count=1)
        assert policies.can_owner_delete(_at(40), r) is False


# ══════════════════════════════════════════════════════════════
# UPDATE
# ══════════════════════════════════════════════════════════════

class TestCanUpdate:
    @pytest.mark.parametrize("offset, expected", [
        (-60, True),
        (-1 / 60, True),
        (0, False),
        (30, False),
    ])
    def test_until_start(self, offset, expected):
        assert policies.can_update(_at(offset), _reservation()) is expected

    def test_pending_is_editable(self):
        assert policies.can_update(_at(-60), _reservation(status=ReservationStatus.PENDING))

    def test_checked_in_or_closed_is_not(self):
        assert not policies.can_update(_at(-5), _reservation(check_in_at=_at(-8)))
        assert not policies.can_update(
            _at(-60), _reservation(status=ReservationStatus.CANCELLED)
        )


# ══════════════════════════════════════════════════════════════
# NO-SHOW / AUTO-FINISH
# ══════════════════════════════════════════════════════════════

class TestNoShow:
    def test_eligible_from_start(self):
        assert policies.is_no_show_eligible(_at(0), _reservation()) is True
        assert policies.is_no_show_eligible(_at(-1), _reservation()) is False

    def test_not_after_check_in(self):
        r = _reservation(check_in_at=_at(-5))
        assert policies.is_no_show_eligible(_at(20), r) is False

    def test_not_twice(self):
        r = _reservation(is_no_show=True, no_show_report_count=1)
        assert policies.is_no_show_eligible(_at(20), r) is False

    def test_auto_no_show_waits_for_grace(self):
        assert policies.is_auto_no_show_due(_at(29), _reservation()) is False
        assert policies.is_auto_no_show_due(_at(30), _reservation()) is True


class TestAutoFinish:
    def test_due_at_end(self):
        assert policies.is_auto_finish_due(END, _reservation()) is True
        assert policies.is_auto_finish_due(END - timedelta(seconds=1), _reservation()) is False

    def test_only_confirmed(self):
        pending = _reservation(status=ReservationStatus.PENDING)
        assert policies.is_auto_finish_due(END, pending) is False


# ══════════════════════════════════════════════════════════════
# TOTALITY
# ══════════════════════════════════════════════════════════════

class TestTotality:
    PREDICATES = (
        policies.can_check_in,
        policies.can_late_check_in,
        policies.can_early_return,
        policies.can_cancel,
        policies.can_owner_delete,
        policies.can_update,
        policies.is_no_show_eligible,
        policies.is_auto_no_show_due,
        policies.is_auto_finish_due,
    )

    @pytest.mark.parametrize("predicate", PREDICATES)
    def test_naive_now_is_false_not_error(self, predicate):
        assert predicate(datetime(2026, 3, 2, 10, 0), _reservation()) is False

    @pytest.mark.parametrize("predicate", PREDICATES)
    def test_garbage_is_false_not_error(self, predicate):
        assert predicate(None, None) is False
        assert predicate("10:00", _reservation()) is False

    def test_predicates_do_not_mutate(self):
        r = _reservation()
        before = r.to_dict()
        policies.window_flags(_at(0), r)
        assert r.to_dict() == before

    def test_window_flags(self):
        flags = policies.window_flags(_at(-9), _reservation())
        assert flags["can_check_in"] is True
        assert flags["can_cancel"] is False
        assert flags["can_update"] is True
        assert flags["can_owner_delete"] is False
        assert flags["is_no_show_eligible"] is False
