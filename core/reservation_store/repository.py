"""
Roombook Reservation Store - ORM Repository
===========================================
DjangoReservationStore implements the ReservationStore contract of
engines.room_reservation.services over the Django ORM.

Guarantees:
- commit() is one transaction: a conditional UPDATE on the reservation
  version, then on the ban record version. Either mismatch raises
  StaleWriteError and rolls both back.
- add_reservation() and replace_reservation() lock the room row and
  refuse a reservation that overlaps another active (pending/confirmed)
  one in the same room.
"""

from __future__ import annotations

from typing import Optional

from django.db import IntegrityError, transaction

from core.reservation_store import models as rows
from engines.room_reservation.errors import SlotUnavailableError, StaleWriteError
from engines.room_reservation.models import (
    BanRecord, Reservation, ReservationStatus, Room,
)

ACTIVE_STATUS_VALUES = (
    ReservationStatus.PENDING.value,
    ReservationStatus.CONFIRMED.value,
)

_RESERVATION_FIELDS = (
    "title",
    "description",
    "attendees",
    "start_time",
    "end_time",
    "check_in_at",
    "is_late",
    "is_no_show",
    "no_show_report_count",
    "no_show_reported_at",
    "version",
)

_BAN_FIELDS = (
    "no_show_count",
    "late_count",
    "temporary_ban_count",
    "ban_until",
    "permanent_ban",
    "last_no_show_at",
    "version",
)


# ══════════════════════════════════════════════════════════════
# ROW ↔ RECORD
# ══════════════════════════════════════════════════════════════

def room_from_row(row: rows.Room) -> Room:
    return Room(
        room_id=row.room_id,
        name=row.name,
        requires_approval=row.requires_approval,
    )


def reservation_from_row(row: rows.Reservation) -> Reservation:
    return Reservation(
        reservation_id=row.reservation_id,
        room_id=row.room_id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        attendees=row.attendees,
        start_time=row.start_time,
        end_time=row.end_time,
        status=ReservationStatus.parse(row.status),
        created_at=row.created_at,
        check_in_at=row.check_in_at,
        is_late=row.is_late,
        is_no_show=row.is_no_show,
        no_show_report_count=row.no_show_report_count,
        no_show_reported_at=row.no_show_reported_at,
        version=row.version,
    )


def ban_record_from_row(row: rows.BanRecord) -> BanRecord:
    return BanRecord(
        user_id=row.user_id,
        no_show_count=row.no_show_count,
        late_count=row.late_count,
        temporary_ban_count=row.temporary_ban_count,
        ban_until=row.ban_until,
        permanent_ban=row.permanent_ban,
        last_no_show_at=row.last_no_show_at,
        version=row.version,
    )


def _reservation_values(reservation: Reservation) -> dict:
    values = {name: getattr(reservation, name) for name in _RESERVATION_FIELDS}
    values["status"] = reservation.status.value
    return values


def _ban_values(record: BanRecord) -> dict:
    return {name: getattr(record, name) for name in _BAN_FIELDS}


# ══════════════════════════════════════════════════════════════
# STORE
# ══════════════════════════════════════════════════════════════

class DjangoReservationStore:
    # ── rooms ─────────────────────────────────────────────────

    def add_room(self, room: Room) -> Room:
        rows.Room.objects.update_or_create(
            room_id=room.room_id,
            defaults={
                "name": room.name,
                "requires_approval": room.requires_approval,
            },
        )
        return room

    def get_room(self, room_id: str) -> Optional[Room]:
        row = rows.Room.objects.filter(room_id=room_id).first()
        return None if row is None else room_from_row(row)

    # ── reservations ──────────────────────────────────────────

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        row = rows.Reservation.objects.filter(reservation_id=reservation_id).first()
        return None if row is None else reservation_from_row(row)

    def list_by_status(self, status) -> list[Reservation]:
        status = ReservationStatus.parse(status)
        query = (
            rows.Reservation.objects.filter(status=status.value)
            .order_by("start_time", "reservation_id")
        )
        return [reservation_from_row(row) for row in query]

    def add_reservation(self, reservation: Reservation) -> Reservation:
        with transaction.atomic():
            room = self._lock_room(reservation.room_id)
            if reservation.status.value in ACTIVE_STATUS_VALUES:
                self._check_slot(reservation)

            rows.Reservation.objects.create(
                reservation_id=reservation.reservation_id,
                room=room,
                user_id=reservation.user_id,
                created_at=reservation.created_at,
                **_reservation_values(reservation),
            )
        return reservation

    def commit(
        self,
        reservation: Reservation,
        expected_version: int,
        ban_record: Optional[BanRecord] = None,
        expected_ban_version: Optional[int] = None,
    ) -> None:
        with transaction.atomic():
            updated = rows.Reservation.objects.filter(
                reservation_id=reservation.reservation_id,
                version=expected_version,
            ).update(**_reservation_values(reservation))
            if updated != 1:
                raise StaleWriteError(
                    "reservation", reservation.reservation_id, expected_version
                )
            if ban_record is not None:
                self._write_ban_record(
                    ban_record,
                    0 if expected_ban_version is None else expected_ban_version,
                )

    def replace_reservation(self, reservation: Reservation, expected_version: int) -> None:
        with transaction.atomic():
            self._lock_room(reservation.room_id)
            updated = rows.Reservation.objects.filter(
                reservation_id=reservation.reservation_id,
                version=expected_version,
            ).update(**_reservation_values(reservation))
            if updated != 1:
                raise StaleWriteError(
                    "reservation", reservation.reservation_id, expected_version
                )
            if reservation.status.value in ACTIVE_STATUS_VALUES:
                self._check_slot(reservation)

    def delete_reservation(self, reservation_id: str, expected_version: int) -> None:
        deleted, _ = rows.Reservation.objects.filter(
            reservation_id=reservation_id,
            version=expected_version,
        ).delete()
        if deleted != 1:
            raise StaleWriteError("reservation", reservation_id, expected_version)

    @staticmethod
    def _lock_room(room_id: str) -> rows.Room:
        room = rows.Room.objects.select_for_update().filter(room_id=room_id).first()
        if room is None:
            raise ValueError(f"room '{room_id}' does not exist.")
        return room

    @staticmethod
    def _check_slot(reservation: Reservation) -> None:
        overlapping = rows.Reservation.objects.filter(
            room_id=reservation.room_id,
            status__in=ACTIVE_STATUS_VALUES,
            start_time__lt=reservation.end_time,
            end_time__gt=reservation.start_time,
        ).exclude(reservation_id=reservation.reservation_id).exists()
        if overlapping:
            raise SlotUnavailableError(reservation.room_id)

    # ── ban records ───────────────────────────────────────────

    def get_ban_record(self, user_id: str) -> Optional[BanRecord]:
        row = rows.BanRecord.objects.filter(user_id=user_id).first()
        return None if row is None else ban_record_from_row(row)

    def save_ban_record(self, record: BanRecord, expected_version: int) -> None:
        with transaction.atomic():
            self._write_ban_record(record, expected_version)

    @staticmethod
    def _write_ban_record(record: BanRecord, expected_version: int) -> None:
        if expected_version == 0:
            try:
                # Savepoint so a duplicate insert does not poison the outer transaction.
                with transaction.atomic():
                    rows.BanRecord.objects.create(
                        user_id=record.user_id, **_ban_values(record)
                    )
            except IntegrityError as exc:
                raise StaleWriteError("ban_record", record.user_id, 0) from exc
            return

        updated = rows.BanRecord.objects.filter(
            user_id=record.user_id,
            version=expected_version,
        ).update(**_ban_values(record))
        if updated != 1:
            raise StaleWriteError("ban_record", record.user_id, expected_version)
