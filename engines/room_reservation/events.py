"""
Roombook Room Reservation Engine — Event Types and Payload Builders
===================================================================
Engine: room_reservation
Scope:  Reservation lifecycle — create, update, approve, reject, check-in,
        early return, finish, cancel, no-show, forced status, delete —
        plus ban issuance and lifting.

Events are returned on accepted outcomes for audit and downstream
consumers (notifications, statistics). The core itself never reads
them back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

RESERVATION_CREATED_V1 = "room.reservation.created.v1"
RESERVATION_UPDATED_V1 = "room.reservation.updated.v1"
RESERVATION_APPROVED_V1 = "room.reservation.approved.v1"
RESERVATION_REJECTED_V1 = "room.reservation.rejected.v1"
RESERVATION_CHECKED_IN_V1 = "room.reservation.checked_in.v1"
RESERVATION_RETURNED_EARLY_V1 = "room.reservation.returned_early.v1"
RESERVATION_FINISHED_V1 = "room.reservation.finished.v1"
RESERVATION_CANCELLED_V1 = "room.reservation.cancelled.v1"
RESERVATION_NO_SHOW_V1 = "room.reservation.no_show.v1"
RESERVATION_STATUS_FORCED_V1 = "room.reservation.status_forced.v1"
RESERVATION_DELETED_V1 = "room.reservation.deleted.v1"
BAN_ISSUED_V1 = "room.ban.issued.v1"
BAN_LIFTED_V1 = "room.ban.lifted.v1"
LATE_RECORDED_V1 = "room.ban.late_recorded.v1"

ROOM_RESERVATION_EVENT_TYPES = (
    RESERVATION_CREATED_V1, RESERVATION_UPDATED_V1, RESERVATION_APPROVED_V1,
    RESERVATION_REJECTED_V1, RESERVATION_CHECKED_IN_V1,
    RESERVATION_RETURNED_EARLY_V1, RESERVATION_FINISHED_V1,
    RESERVATION_CANCELLED_V1, RESERVATION_NO_SHOW_V1,
    RESERVATION_STATUS_FORCED_V1, RESERVATION_DELETED_V1,
    BAN_ISSUED_V1, BAN_LIFTED_V1, LATE_RECORDED_V1,
)


@dataclass(frozen=True)
class ReservationEvent:
    event_type: str
    subject_id: str
    actor_id: str
    occurred_at: datetime
    payload: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.event_type not in ROOM_RESERVATION_EVENT_TYPES:
            raise ValueError(f"Unknown event type: {self.event_type}")
        if not self.subject_id:
            raise ValueError("subject_id must be non-empty.")
        if not self.actor_id:
            raise ValueError("actor_id must be non-empty.")

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "subject_id": self.subject_id,
            "actor_id": self.actor_id,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": dict(self.payload),
        }


def _iso(value):
    return None if value is None else value.isoformat()


def build_reservation_payload(reservation) -> dict:
    return {
        "reservation_id": reservation.reservation_id,
        "room_id": reservation.room_id,
        "user_id": reservation.user_id,
        "status": reservation.status.value,
        "start_time": _iso(reservation.start_time),
        "end_time": _iso(reservation.end_time),
    }


def build_checked_in_payload(reservation) -> dict:
    payload = build_reservation_payload(reservation)
    payload["check_in_at"] = _iso(reservation.check_in_at)
    payload["is_late"] = reservation.is_late
    return payload


def build_no_show_payload(reservation) -> dict:
    payload = build_reservation_payload(reservation)
    payload["no_show_report_count"] = reservation.no_show_report_count
    payload["no_show_reported_at"] = _iso(reservation.no_show_reported_at)
    return payload


def build_status_forced_payload(reservation, previous_status) -> dict:
    payload = build_reservation_payload(reservation)
    payload["previous_status"] = previous_status.value
    return payload


def build_ban_payload(record) -> dict:
    return {
        "user_id": record.user_id,
        "no_show_count": record.no_show_count,
        "late_count": record.late_count,
        "temporary_ban_count": record.temporary_ban_count,
        "ban_until": _iso(record.ban_until),
        "permanent_ban": record.permanent_ban,
    }


PAYLOAD_BUILDERS = {
    RESERVATION_CREATED_V1: build_reservation_payload,
    RESERVATION_UPDATED_V1: build_reservation_payload,
    RESERVATION_APPROVED_V1: build_reservation_payload,
    RESERVATION_REJECTED_V1: build_reservation_payload,
    RESERVATION_CHECKED_IN_V1: build_checked_in_payload,
    RESERVATION_RETURNED_EARLY_V1: build_reservation_payload,
    RESERVATION_FINISHED_V1: build_reservation_payload,
    RESERVATION_CANCELLED_V1: build_reservation_payload,
    RESERVATION_NO_SHOW_V1: build_no_show_payload,
    RESERVATION_DELETED_V1: build_reservation_payload,
}


def reservation_event(event_type: str, reservation, actor_id: str,
                      occurred_at: datetime) -> ReservationEvent:
    builder = PAYLOAD_BUILDERS[event_type]
    return ReservationEvent(
        event_type=event_type,
        subject_id=reservation.reservation_id,
        actor_id=actor_id,
        occurred_at=occurred_at,
        payload=builder(reservation),
    )


def ban_event(event_type: str, record, actor_id: str,
              occurred_at: datetime) -> ReservationEvent:
    return ReservationEvent(
        event_type=event_type,
        subject_id=record.user_id,
        actor_id=actor_id,
        occurred_at=occurred_at,
        payload=build_ban_payload(record),
    )
