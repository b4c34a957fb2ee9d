"""
Roombook Command Layer — Action Outcome Contract
================================================
Every reservation action produces exactly one Outcome.

ACCEPTED → the transition was applied; the new snapshot is attached.
REJECTED → nothing was written; the reason is mandatory.

Rules:
- Exactly one outcome per attempt
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
- occurred_at is mandatory
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from core.commands.rejection import RejectionReason


class OutcomeStatus(Enum):
    """Binary decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class ActionOutcome:
    """
    Result of one attempt to act on a reservation.

    Fields:
        action:      Action name (e.g. 'check_in').
        status:      ACCEPTED or REJECTED.
        reason:      RejectionReason (mandatory if REJECTED, None if ACCEPTED).
        occurred_at: Evaluation time supplied by the caller.
        reservation: Snapshot after the action (ACCEPTED), or the state the
                     decision was based on (REJECTED), when one was loaded.
        ban_record:  Updated ban record when the action touched it.
        events:      Event records emitted by an accepted action.
    """

    action: str
    status: OutcomeStatus
    reason: Optional[RejectionReason]
    occurred_at: datetime
    reservation: Any = None
    ban_record: Any = None
    events: tuple = ()

    def __post_init__(self):
        if not self.action or not isinstance(self.action, str):
            raise ValueError("action must be a non-empty string.")

        if not isinstance(self.status, OutcomeStatus):
            raise ValueError(
                f"status must be OutcomeStatus, got {type(self.status).__name__}."
            )

        if self.status == OutcomeStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == OutcomeStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

        if not isinstance(self.events, tuple):
            raise ValueError("events must be a tuple.")

    @classmethod
    def accepted(cls, action: str, occurred_at: datetime, *,
                 reservation=None, ban_record=None, events=()) -> "ActionOutcome":
        return cls(
            action=action,
            status=OutcomeStatus.ACCEPTED,
            reason=None,
            occurred_at=occurred_at,
            reservation=reservation,
            ban_record=ban_record,
            events=tuple(events),
        )

    @classmethod
    def rejected(cls, action: str, occurred_at: datetime,
                 reason: RejectionReason, *, reservation=None) -> "ActionOutcome":
        return cls(
            action=action,
            status=OutcomeStatus.REJECTED,
            reason=reason,
            occurred_at=occurred_at,
            reservation=reservation,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == OutcomeStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == OutcomeStatus.REJECTED

    @property
    def reason_code(self) -> Optional[str]:
        return None if self.reason is None else self.reason.code
