"""
Roombook Room Reservation Engine — Actions and Requests
=======================================================
Action names accepted by ReservationLifecycleService.attempt() and
the request objects for creating and updating a reservation.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.time.temporal import require_aware

ACTION_APPROVE        = "approve"
ACTION_REJECT         = "reject"
ACTION_CHECK_IN       = "check_in"
ACTION_EARLY_RETURN   = "early_return"
ACTION_AUTO_FINISH    = "auto_finish"
ACTION_CANCEL         = "cancel"
ACTION_DETECT_NO_SHOW = "detect_no_show"
ACTION_REPORT_NO_SHOW = "report_no_show"
ACTION_FORCE_STATUS   = "force_status"
ACTION_DELETE         = "delete"
ACTION_CREATE         = "create"
ACTION_UPDATE         = "update"

# Actions the owning user performs on their own reservation.
USER_ACTIONS = frozenset({
    ACTION_CHECK_IN, ACTION_EARLY_RETURN, ACTION_CANCEL,
})

# Actions staff-level roles perform on any reservation.
ADMIN_ACTIONS = frozenset({
    ACTION_APPROVE, ACTION_REJECT, ACTION_FORCE_STATUS, ACTION_DELETE,
})

# Time-triggered actions driven by the external scheduler.
SYSTEM_ACTIONS = frozenset({
    ACTION_AUTO_FINISH, ACTION_DETECT_NO_SHOW,
})

NO_SHOW_ACTIONS = frozenset({ACTION_DETECT_NO_SHOW, ACTION_REPORT_NO_SHOW})

RESERVATION_ACTIONS = USER_ACTIONS | ADMIN_ACTIONS | SYSTEM_ACTIONS | {ACTION_REPORT_NO_SHOW}


def normalize_action(action) -> str:
    if not isinstance(action, str) or not action.strip():
        raise ValueError("action must be a non-empty string.")
    normalized = action.strip().lower().replace("-", "_")
    if normalized not in RESERVATION_ACTIONS:
        raise ValueError(
            f"action '{action}' not valid. "
            f"Must be one of: {sorted(RESERVATION_ACTIONS)}"
        )
    return normalized


@dataclass(frozen=True)
class CreateReservationRequest:
    room_id:     str
    title:       str
    start_time:  datetime
    end_time:    datetime
    description: str = ""
    attendees:   int = 0

    def __post_init__(self):
        if not self.room_id: raise ValueError("room_id must be non-empty.")
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValueError("title must be non-empty.")
        require_aware(self.start_time, "start_time")
        require_aware(self.end_time, "end_time")
        if not isinstance(self.attendees, int) or self.attendees < 0:
            raise ValueError("attendees must be >= 0.")


@dataclass(frozen=True)
class UpdateReservationRequest:
    """Owner edit of an upcoming reservation. None leaves a field unchanged."""

    title:       Optional[str] = None
    description: Optional[str] = None
    start_time:  Optional[datetime] = None
    end_time:    Optional[datetime] = None
    attendees:   Optional[int] = None

    def __post_init__(self):
        if self.title is not None and (
                not isinstance(self.title, str) or not self.title.strip()):
            raise ValueError("title must be non-empty.")
        require_aware(self.start_time, "start_time", optional=True)
        require_aware(self.end_time, "end_time", optional=True)
        if self.attendees is not None and (
                not isinstance(self.attendees, int) or self.attendees < 0):
            raise ValueError("attendees must be >= 0.")
        if self.is_empty:
            raise ValueError("at least one field must change.")

    @property
    def is_empty(self) -> bool:
        return not self.changes()

    @property
    def changes_time(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    def changes(self) -> dict:
        return {
            name: value for name, value in (
                ("title", self.title),
                ("description", self.description),
                ("start_time", self.start_time),
                ("end_time", self.end_time),
                ("attendees", self.attendees),
            )
            if value is not None
        }
