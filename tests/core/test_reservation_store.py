from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.reservation_store import models as rows
from core.reservation_store.repository import DjangoReservationStore
from engines.room_reservation.errors import SlotUnavailableError, StaleWriteError
from engines.room_reservation.models import (
    BanRecord, Reservation, ReservationStatus, Room,
)

pytestmark = pytest.mark.django_db(transaction=True)


START = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=1)


def _store() -> DjangoReservationStore:
    store = DjangoReservationStore()
    store.add_room(Room(room_id="room-1", name="Seminar A"))
    store.add_room(Room(room_id="room-2", name="Board room", requires_approval=True))
    return store


def _reservation(reservation_id="r-1", **overrides) -> Reservation:
    fields = dict(
        reservation_id=reservation_id,
        room_id="room-1",
        user_id="u-1",
        title="Study group",
        start_time=START,
        end_time=END,
        status=ReservationStatus.CONFIRMED,
        created_at=START - timedelta(days=1),
    )
    fields.update(overrides)
    return Reservation(**fields)


def test_rooms_round_trip_and_update_in_place() -> None:
    store = _store()
    assert store.get_room("room-2") == Room(
        room_id="room-2", name="Board room", requires_approval=True
    )
    store.add_room(Room(room_id="room-2", name="Board room", requires_approval=False))
    assert store.get_room("room-2").requires_approval is False
    assert rows.Room.objects.count() == 2
    assert store.get_room("room-9") is None


def test_add_and_read_reservation() -> None:
    store = _store()
    reservation = _reservation(description="weekly", attendees=4)
    store.add_reservation(reservation)

    loaded = store.get_reservation("r-1")
    assert loaded == reservation
    assert loaded.start_time.tzinfo is not None
    assert store.get_reservation("missing") is None


def test_add_reservation_requires_room() -> None:
    store = _store()
    with pytest.raises(ValueError, match="does not exist"):
        store.add_reservation(_reservation(room_id="room-9"))


def test_overlap_in_same_room_is_refused() -> None:
    store = _store()
    store.add_reservation(_reservation())

    with pytest.raises(SlotUnavailableError):
        store.add_reservation(_reservation(
            "r-2", start_time=START + timedelta(minutes=30),
            end_time=END + timedelta(minutes=30),
        ))

    # Touching intervals, other rooms and inactive rows do not conflict.
    store.add_reservation(_reservation("r-3", start_time=END, end_time=END + timedelta(hours=1)))
    store.add_reservation(_reservation("r-4", room_id="room-2"))
    store.add_reservation(_reservation("r-5", status=ReservationStatus.CANCELLED))
    assert rows.Reservation.objects.count() == 4


def test_list_by_status_is_ordered_by_start() -> None:
    store = _store()
    store.add_reservation(_reservation("r-late", start_time=END, end_time=END + timedelta(hours=1)))
    store.add_reservation(_reservation("r-early"))
    store.add_reservation(_reservation("r-pending", room_id="room-2",
                                       status=ReservationStatus.PENDING))

    confirmed = store.list_by_status("confirmed")
    assert [r.reservation_id for r in confirmed] == ["r-early", "r-late"]
    assert [r.reservation_id for r in store.list_by_status(ReservationStatus.PENDING)] == [
        "r-pending"
    ]


def test_commit_is_compare_and_swap() -> None:
    store = _store()
    store.add_reservation(_reservation())
    fresh = store.get_reservation("r-1")

    checked_in = fresh.evolve(check_in_at=START - timedelta(minutes=5))
    store.commit(checked_in, expected_version=1)
    assert store.get_reservation("r-1").version == 2

    with pytest.raises(StaleWriteError):
        store.commit(fresh.evolve(status=ReservationStatus.CANCELLED), expected_version=1)
    assert store.get_reservation("r-1") == checked_in


def test_commit_creates_then_updates_ban_record() -> None:
    store = _store()
    store.add_reservation(_reservation())
    reservation = store.get_reservation("r-1")

    first = BanRecord(user_id="u-1", no_show_count=1, version=1,
                      last_no_show_at=START)
    store.commit(
        reservation.evolve(is_no_show=True, no_show_report_count=1,
                           no_show_reported_at=START,
                           status=ReservationStatus.CANCELLED),
        expected_version=1,
        ban_record=first,
        expected_ban_version=0,
    )
    assert store.get_ban_record("u-1") == first

    second = first.evolve(no_show_count=2)
    store.save_ban_record(second, expected_version=1)
    assert store.get_ban_record("u-1").no_show_count == 2


def test_stale_ban_version_rolls_back_reservation() -> None:
    store = _store()
    store.add_reservation(_reservation())
    store.save_ban_record(BanRecord(user_id="u-1", no_show_count=1, version=1), 0)
    reservation = store.get_reservation("r-1")

    with pytest.raises(StaleWriteError):
        store.commit(
            reservation.evolve(status=ReservationStatus.FINISHED),
            expected_version=1,
            ban_record=BanRecord(user_id="u-1", no_show_count=1, version=1),
            expected_ban_version=0,
        )

    assert store.get_reservation("r-1").status is ReservationStatus.CONFIRMED
    assert store.get_reservation("r-1").version == 1


def test_save_ban_record_rejects_stale_version() -> None:
    store = _store()
    record = BanRecord(user_id="u-1", no_show_count=3, temporary_ban_count=1,
                       ban_until=START + timedelta(days=7), version=3)
    store.save_ban_record(record, 0)

    with pytest.raises(StaleWriteError):
        store.save_ban_record(record.evolve(ban_until=None), expected_version=2)
    with pytest.raises(StaleWriteError):
        store.save_ban_record(record, expected_version=0)
    assert store.get_ban_record("u-1") == record


def test_delete_reservation_is_compare_and_swap() -> None:
    store = _store()
    store.add_reservation(_reservation())

    with pytest.raises(StaleWriteError):
        store.delete_reservation("r-1", expected_version=2)
    store.delete_reservation("r-1", expected_version=1)
    assert store.get_reservation("r-1") is None

    with pytest.raises(StaleWriteError):
        store.delete_reservation("r-1", expected_version=1)


def test_replace_reservation_moves_slot_and_excludes_itself() -> None:
    store = _store()
    store.add_reservation(_reservation())
    moved = store.get_reservation("r-1").evolve(
        title="Exam prep",
        start_time=START + timedelta(minutes=30),
        end_time=END + timedelta(minutes=30),
    )
    store.replace_reservation(moved, expected_version=1)

    loaded = store.get_reservation("r-1")
    assert loaded == moved
    assert loaded.version == 2


def test_replace_reservation_refuses_overlap_and_stale_version() -> None:
    store = _store()
    store.add_reservation(_reservation())
    store.add_reservation(_reservation(
        "r-2", user_id="u-2",
        start_time=END + timedelta(hours=1), end_time=END + timedelta(hours=2),
    ))
    current = store.get_reservation("r-1")

    with pytest.raises(SlotUnavailableError):
        store.replace_reservation(
            current.evolve(end_time=END + timedelta(hours=1, minutes=30)), 1
        )
    with pytest.raises(StaleWriteError):
        store.replace_reservation(current.evolve(title="Renamed"), expected_version=4)

    assert store.get_reservation("r-1") == current
