"""
Tests for engines.room_reservation.sweeper — one scheduler pass.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from core.permissions import PermissionResolver, PermissionTable
from engines.room_reservation.errors import StaleWriteError
from engines.room_reservation.models import Reservation, ReservationStatus, Room
from engines.room_reservation.services import (
    InMemoryReservationStore, ReservationLifecycleService,
)
from engines.room_reservation.sweeper import run_sweep

DAY = datetime(2026, 3, 2, tzinfo=timezone.utc)
NOW = DAY + timedelta(hours=10, minutes=30)


def _reservation(reservation_id, start_hour, end_hour, **overrides) -> Reservation:
    fields = dict(
        reservation_id=reservation_id,
        room_id="room-1",
        user_id="u-1",
        title="Study group",
        start_time=DAY + timedelta(hours=start_hour),
        end_time=DAY + timedelta(hours=end_hour),
        status=ReservationStatus.CONFIRMED,
        created_at=DAY - timedelta(days=1),
    )
    fields.update(overrides)
    return Reservation(**fields)


def _build(store):
    store.add_room(Room(room_id="room-1"))
    service = ReservationLifecycleService(
        store=store, resolver=PermissionResolver(PermissionTable.default()),
    )
    for reservation in (
        _reservation("r-done", 8, 9, check_in_at=DAY + timedelta(hours=7, minutes=55)),
        _reservation("r-absent-past", 9, 9.5),
        _reservation("r-absent", 10, 11),
        _reservation("r-later", 12, 13),
        _reservation("r-pending", 13, 14, status=ReservationStatus.PENDING),
    ):
        store.add_reservation(reservation)
    return service


class TestRunSweep:
    def test_finishes_and_detects(self):
        store = InMemoryReservationStore()
        service = _build(store)

        summary = run_sweep(service, store, NOW)

        assert summary.finished == ["r-done"]
        assert summary.no_shows == ["r-absent-past", "r-absent"]
        assert summary.rejected == []
        assert store.get_reservation("r-done").status is ReservationStatus.FINISHED
        assert store.get_reservation("r-absent").is_no_show is True
        assert store.get_reservation("r-later").status is ReservationStatus.CONFIRMED
        assert store.get_reservation("r-pending").status is ReservationStatus.PENDING
        assert store.get_ban_record("u-1").no_show_count == 2

    def test_no_show_wins_over_finish(self):
        store = InMemoryReservationStore()
        service = _build(store)
        summary = run_sweep(service, store, NOW)
        assert "r-absent-past" not in summary.finished
        assert store.get_reservation("r-absent-past").is_no_show is True

    def test_second_pass_is_idempotent(self):
        store = InMemoryReservationStore()
        service = _build(store)
        run_sweep(service, store, NOW)
        summary = run_sweep(service, store, NOW)
        assert summary.to_dict() == {"finished": [], "no_shows": [], "rejected": []}

    def test_nothing_due_before_grace(self):
        store = InMemoryReservationStore()
        service = _build(store)
        summary = run_sweep(service, store, DAY + timedelta(hours=7))
        assert summary.to_dict() == {"finished": [], "no_shows": [], "rejected": []}

    def test_lost_races_are_reported(self):
        class AlwaysStaleStore(InMemoryReservationStore):
            def commit(self, reservation, expected_version, ban_record=None,
                       expected_ban_version=None):
                raise StaleWriteError("reservation", reservation.reservation_id,
                                      expected_version)

        store = AlwaysStaleStore()
        service = _build(store)
        summary = run_sweep(service, store, NOW)
        assert sorted(summary.rejected) == ["r-absent", "r-absent-past", "r-done"]
        assert store.get_reservation("r-done").status is ReservationStatus.CONFIRMED
