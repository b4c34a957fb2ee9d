"""
Roombook Room Reservation Engine — Domain Records
=================================================
Immutable snapshots of rooms, reservations and per-user ban records.

Records never change in place. Every transition produces a new
snapshot via dataclasses.replace(); `version` is the optimistic
concurrency token the storage layer compares on write.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from core.time.temporal import require_aware


class ReservationStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FINISHED = "finished"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @classmethod
    def parse(cls, value) -> "ReservationStatus":
        if isinstance(value, ReservationStatus):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(
                f"status '{value}' not valid. "
                f"Must be one of: {sorted(s.value for s in cls)}"
            ) from exc


TERMINAL_STATUSES = frozenset({ReservationStatus.FINISHED, ReservationStatus.CANCELLED})

# Forward order used to keep status changes monotonic.
STATUS_RANK = {
    ReservationStatus.PENDING: 0,
    ReservationStatus.CONFIRMED: 1,
    ReservationStatus.FINISHED: 2,
    ReservationStatus.CANCELLED: 2,
}


@dataclass(frozen=True)
class Room:
    room_id: str
    name: str = ""
    requires_approval: bool = False

    def __post_init__(self):
        if not self.room_id or not isinstance(self.room_id, str):
            raise ValueError("room_id must be a non-empty string.")
        if not isinstance(self.requires_approval, bool):
            raise ValueError("requires_approval must be a bool.")


@dataclass(frozen=True)
class Reservation:
    reservation_id: str
    room_id: str
    user_id: str
    title: str
    start_time: datetime
    end_time: datetime
    status: ReservationStatus
    created_at: datetime
    check_in_at: Optional[datetime] = None
    is_no_show: bool = False
    no_show_report_count: int = 0
    no_show_reported_at: Optional[datetime] = None
    is_late: bool = False
    description: str = ""
    attendees: int = 0
    version: int = 1

    def __post_init__(self):
        if not self.reservation_id or not isinstance(self.reservation_id, str):
            raise ValueError("reservation_id must be a non-empty string.")
        if not self.room_id or not isinstance(self.room_id, str):
            raise ValueError("room_id must be a non-empty string.")
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValueError("title must be a non-empty string.")

        require_aware(self.start_time, "start_time")
        require_aware(self.end_time, "end_time")
        require_aware(self.created_at, "created_at")
        require_aware(self.check_in_at, "check_in_at", optional=True)
        require_aware(self.no_show_reported_at, "no_show_reported_at", optional=True)

        if self.start_time >= self.end_time:
            raise ValueError("start_time must be earlier than end_time.")

        object.__setattr__(self, "status", ReservationStatus.parse(self.status))

        if self.is_no_show and self.check_in_at is not None:
            raise ValueError("a no-show reservation cannot have check_in_at.")
        if self.is_late and self.check_in_at is None:
            raise ValueError("is_late requires check_in_at.")
        if not isinstance(self.no_show_report_count, int) or self.no_show_report_count < 0:
            raise ValueError("no_show_report_count must be a non-negative integer.")
        if not isinstance(self.attendees, int) or self.attendees < 0:
            raise ValueError("attendees must be a non-negative integer.")
        if not isinstance(self.version, int) or self.version < 1:
            raise ValueError("version must be a positive integer.")

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_at is not None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def evolve(self, **changes) -> "Reservation":
        """New snapshot with changes applied and the version bumped."""
        changes.setdefault("version", self.version + 1)
        return replace(self, **changes)

    def to_dict(self) -> dict:
        def _iso(value: Optional[datetime]) -> Optional[str]:
            return None if value is None else value.isoformat()

        return {
            "reservation_id": self.reservation_id,
            "room_id": self.room_id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "attendees": self.attendees,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "status": self.status.value,
            "check_in_at": _iso(self.check_in_at),
            "is_late": self.is_late,
            "is_no_show": self.is_no_show,
            "no_show_report_count": self.no_show_report_count,
            "no_show_reported_at": _iso(self.no_show_reported_at),
            "created_at": _iso(self.created_at),
            "version": self.version,
        }


@dataclass(frozen=True)
class BanRecord:
    user_id: str
    no_show_count: int = 0
    late_count: int = 0
    temporary_ban_count: int = 0
    ban_until: Optional[datetime] = None
    permanent_ban: bool = False
    last_no_show_at: Optional[datetime] = None
    version: int = 0

    def __post_init__(self):
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")
        for name in ("no_show_count", "late_count", "temporary_ban_count", "version"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer.")
        require_aware(self.ban_until, "ban_until", optional=True)
        require_aware(self.last_no_show_at, "last_no_show_at", optional=True)
        if self.permanent_ban and self.ban_until is not None:
            raise ValueError("a permanent ban has no ban_until.")

    @classmethod
    def empty(cls, user_id: str) -> "BanRecord":
        """Unsaved record (version 0) for a user with no infractions yet."""
        return cls(user_id=user_id)

    def evolve(self, **changes) -> "BanRecord":
        changes.setdefault("version", self.version + 1)
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "no_show_count": self.no_show_count,
            "late_count": self.late_count,
            "temporary_ban_count": self.temporary_ban_count,
            "ban_until": None if self.ban_until is None else self.ban_until.isoformat(),
            "permanent_ban": self.permanent_ban,
            "last_no_show_at": (
                None if self.last_no_show_at is None
                else self.last_no_show_at.isoformat()
            ),
        }
