"""
Roombook Room Reservation Engine — Reservation State Machine
============================================================
Owns the legal status transitions and their structural preconditions.

    pending ──approve──▶ confirmed ──auto_finish / early_return──▶ finished
       │                    │
       └──reject/cancel──▶ cancelled ◀──cancel / no-show (when configured)

finished and cancelled are terminal; status never moves backwards.

Time windows are NOT checked here (see policies). This module answers
"is the action legal from this state", and applies it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from core.commands.rejection import RejectionReason, invalid_transition
from core.config.rules import ReservationRules
from engines.room_reservation.commands import (
    ACTION_APPROVE, ACTION_AUTO_FINISH, ACTION_CANCEL, ACTION_CHECK_IN,
    ACTION_DELETE, ACTION_DETECT_NO_SHOW, ACTION_EARLY_RETURN,
    ACTION_FORCE_STATUS, ACTION_REJECT, ACTION_REPORT_NO_SHOW,
    NO_SHOW_ACTIONS, normalize_action,
)
from engines.room_reservation.errors import InvalidTransitionError
from engines.room_reservation.models import Reservation, ReservationStatus

PENDING = ReservationStatus.PENDING
CONFIRMED = ReservationStatus.CONFIRMED
FINISHED = ReservationStatus.FINISHED
CANCELLED = ReservationStatus.CANCELLED

# Every legal status edge. Used to validate forced status changes.
STATUS_EDGES = frozenset({
    (PENDING, CONFIRMED),
    (PENDING, CANCELLED),
    (CONFIRMED, FINISHED),
    (CONFIRMED, CANCELLED),
})


def is_forward(current: ReservationStatus, target: ReservationStatus) -> bool:
    return (current, target) in STATUS_EDGES


# ══════════════════════════════════════════════════════════════
# STRUCTURAL GUARDS — return a failure message or None
# ══════════════════════════════════════════════════════════════

def _not_no_show(r: Reservation) -> Optional[str]:
    if r.is_no_show:
        return f"reservation '{r.reservation_id}' is marked as a no-show."
    return None


def _not_checked_in(r: Reservation) -> Optional[str]:
    if r.check_in_at is not None:
        return f"reservation '{r.reservation_id}' is already checked in."
    return _not_no_show(r)


def _checked_in(r: Reservation) -> Optional[str]:
    if r.check_in_at is None:
        return f"reservation '{r.reservation_id}' has not been checked in."
    return _not_no_show(r)


def _no_guard(r: Reservation) -> Optional[str]:
    return None


@dataclass(frozen=True)
class Transition:
    action: str
    allowed_from: frozenset
    guard: Callable[[Reservation], Optional[str]]
    guard_name: str


TRANSITIONS: dict[str, Transition] = {
    ACTION_APPROVE: Transition(
        ACTION_APPROVE, frozenset({PENDING}), _no_guard, "reservation_must_be_pending"),
    ACTION_REJECT: Transition(
        ACTION_REJECT, frozenset({PENDING}), _no_guard, "reservation_must_be_pending"),
    ACTION_CHECK_IN: Transition(
        ACTION_CHECK_IN, frozenset({CONFIRMED}), _not_checked_in, "check_in_once"),
    ACTION_EARLY_RETURN: Transition(
        ACTION_EARLY_RETURN, frozenset({CONFIRMED}), _checked_in, "early_return_requires_check_in"),
    ACTION_AUTO_FINISH: Transition(
        ACTION_AUTO_FINISH, frozenset({CONFIRMED}), _no_guard, "reservation_must_be_confirmed"),
    ACTION_CANCEL: Transition(
        ACTION_CANCEL, frozenset({PENDING, CONFIRMED}), _not_no_show, "cancel_not_after_no_show"),
    ACTION_DETECT_NO_SHOW: Transition(
        ACTION_DETECT_NO_SHOW, frozenset({CONFIRMED}), _not_checked_in, "no_show_requires_absence"),
    ACTION_REPORT_NO_SHOW: Transition(
        ACTION_REPORT_NO_SHOW, frozenset({CONFIRMED}), _not_checked_in, "no_show_requires_absence"),
    ACTION_FORCE_STATUS: Transition(
        ACTION_FORCE_STATUS, frozenset({PENDING, CONFIRMED}), _no_guard, "status_must_move_forward"),
    ACTION_DELETE: Transition(
        ACTION_DELETE, frozenset(ReservationStatus), _no_guard, "delete_any"),
}


# ══════════════════════════════════════════════════════════════
# LEGALITY
# ══════════════════════════════════════════════════════════════

def check_transition(
    reservation: Reservation,
    action: str,
    *,
    target_status: Optional[ReservationStatus] = None,
) -> Optional[RejectionReason]:
    """None if the action is legal from the current state, else the reason."""
    action = normalize_action(action)
    transition = TRANSITIONS[action]

    if reservation.status not in transition.allowed_from:
        allowed = sorted(s.value for s in transition.allowed_from)
        return invalid_transition(
            f"cannot {action} reservation '{reservation.reservation_id}' "
            f"in status '{reservation.status.value}' (allowed from {allowed}).",
            transition.guard_name,
        )

    failure = transition.guard(reservation)
    if failure is not None:
        return invalid_transition(failure, transition.guard_name)

    if action == ACTION_FORCE_STATUS:
        if target_status is None:
            return invalid_transition(
                "force_status requires a target status.",
                transition.guard_name,
            )
        target = ReservationStatus.parse(target_status)
        if not is_forward(reservation.status, target):
            return invalid_transition(
                f"cannot move reservation '{reservation.reservation_id}' "
                f"from '{reservation.status.value}' to '{target.value}'.",
                transition.guard_name,
            )

    return None


def is_legal(reservation: Reservation, action: str, **kwargs) -> bool:
    return check_transition(reservation, action, **kwargs) is None


def allowed_actions(reservation: Reservation) -> tuple[str, ...]:
    """Actions legal from the current state, ignoring time and actor."""
    return tuple(
        action for action in TRANSITIONS
        if action != ACTION_FORCE_STATUS and is_legal(reservation, action)
    )


# ══════════════════════════════════════════════════════════════
# APPLICATION
# ══════════════════════════════════════════════════════════════

def apply_transition(
    reservation: Reservation,
    action: str,
    now: datetime,
    rules: ReservationRules,
    *,
    late: bool = False,
    target_status: Optional[ReservationStatus] = None,
) -> Reservation:
    """
    Apply a legal transition and return the new snapshot.

    Raises InvalidTransitionError if the action is illegal from the
    current state. delete produces no snapshot and is not handled here.
    """
    action = normalize_action(action)
    rejection = check_transition(reservation, action, target_status=target_status)
    if rejection is not None:
        raise InvalidTransitionError(action, rejection.message, rejection.policy_name)

    if action == ACTION_APPROVE:
        return reservation.evolve(status=CONFIRMED)

    if action in (ACTION_REJECT, ACTION_CANCEL):
        return reservation.evolve(status=CANCELLED)

    if action == ACTION_CHECK_IN:
        return reservation.evolve(check_in_at=now, is_late=late)

    if action == ACTION_EARLY_RETURN:
        # At exactly start_time end_time is kept so start < end holds.
        end_time = now if now > reservation.start_time else reservation.end_time
        return reservation.evolve(status=FINISHED, end_time=min(end_time, reservation.end_time))

    if action == ACTION_AUTO_FINISH:
        return reservation.evolve(status=FINISHED)

    if action in NO_SHOW_ACTIONS:
        changes = {
            "is_no_show": True,
            "no_show_report_count": reservation.no_show_report_count + 1,
            "no_show_reported_at": now,
        }
        if rules.no_show_cancels_reservation:
            changes["status"] = CANCELLED
        return reservation.evolve(**changes)

    if action == ACTION_FORCE_STATUS:
        return reservation.evolve(status=ReservationStatus.parse(target_status))

    raise InvalidTransitionError(
        action, f"action '{action}' does not produce a new snapshot.", "no_snapshot"
    )
