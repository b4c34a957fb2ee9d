"""
Roombook Room Reservation Engine — Time Window Policies
======================================================
Pure, total predicates of (now, reservation, rules).

They never raise and never mutate; the same predicates drive UI
affordances and gate the mutating lifecycle operations. Boundaries:

    check-in        start - 10min <= now <= start + 10min
    late check-in   start + 10min <  now <= start + 10min + grace
    early return    start <= now < end, checked in
    cancel          now <= start - 30min
    owner delete    finished or cancelled, or cancel still open
    update          now < start, not checked in
    no-show         now >= start, not checked in
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.config.rules import ReservationRules
from core.time.temporal import TimeWindow
from engines.room_reservation.models import Reservation, ReservationStatus

DEFAULT_RULES = ReservationRules()


def _rules(rules: Optional[ReservationRules]) -> ReservationRules:
    return DEFAULT_RULES if rules is None else rules


def _comparable(now, reservation) -> bool:
    """Guard that keeps every predicate total on malformed input."""
    if not isinstance(now, datetime) or not isinstance(reservation, Reservation):
        return False
    return now.tzinfo is not None and now.tzinfo.utcoffset(now) is not None


def check_in_window(reservation: Reservation, rules: Optional[ReservationRules] = None) -> TimeWindow:
    r = _rules(rules)
    return TimeWindow.around(reservation.start_time, r.check_in_before, r.check_in_after)


def _awaiting_check_in(reservation: Reservation) -> bool:
    return (
        reservation.status is ReservationStatus.CONFIRMED
        and reservation.check_in_at is None
        and not reservation.is_no_show
    )


def can_check_in(now: datetime, reservation: Reservation,
                 rules: Optional[ReservationRules] = None) -> bool:
    if not _comparable(now, reservation):
        return False
    return (
        _awaiting_check_in(reservation)
        and check_in_window(reservation, rules).contains(now)
    )


def can_late_check_in(now: datetime, reservation: Reservation,
                      rules: Optional[ReservationRules] = None) -> bool:
    r = _rules(rules)
    if not _comparable(now, reservation) or not r.late_check_in_enabled:
        return False
    on_time_end = reservation.start_time + r.check_in_after
    return (
        _awaiting_check_in(reservation)
        and on_time_end < now <= on_time_end + r.late_check_in_grace
    )


def can_early_return(now: datetime, reservation: Reservation,
                     rules: Optional[ReservationRules] = None) -> bool:
    if not _comparable(now, reservation):
        return False
    return (
        reservation.check_in_at is not None
        and reservation.start_time <= now < reservation.end_time
        and reservation.status not in (ReservationStatus.FINISHED, ReservationStatus.CANCELLED)
        and not reservation.is_no_show
    )


def cancellation_deadline(reservation: Reservation,
                          rules: Optional[ReservationRules] = None) -> datetime:
    return reservation.start_time - _rules(rules).cancel_cutoff


def can_cancel(now: datetime, reservation: Reservation,
               rules: Optional[ReservationRules] = None) -> bool:
    if not _comparable(now, reservation):
        return False
    return (
        reservation.status not in (ReservationStatus.FINISHED, ReservationStatus.CANCELLED)
        and not reservation.is_no_show
        and now <= cancellation_deadline(reservation, rules)
    )


def can_owner_delete(now: datetime, reservation: Reservation,
                     rules: Optional[ReservationRules] = None) -> bool:
    """Owners may remove a closed reservation, or an open one they could still cancel."""
    if not _comparable(now, reservation):
        return False
    return reservation.status.is_terminal or can_cancel(now, reservation, rules)


def can_update(now: datetime, reservation: Reservation,
               rules: Optional[ReservationRules] = None) -> bool:
    """Details stay editable until the reservation starts."""
    if not _comparable(now, reservation):
        return False
    return (
        not reservation.is_terminal
        and not reservation.is_checked_in
        and not reservation.is_no_show
        and now < reservation.start_time
    )


def is_no_show_eligible(now: datetime, reservation: Reservation,
                        rules: Optional[ReservationRules] = None) -> bool:
    if not _comparable(now, reservation):
        return False
    return _awaiting_check_in(reservation) and now >= reservation.start_time


def is_auto_no_show_due(now: datetime, reservation: Reservation,
                        rules: Optional[ReservationRules] = None) -> bool:
    """Scheduler selection: eligible and past the automatic grace period."""
    if not is_no_show_eligible(now, reservation, rules):
        return False
    return now >= reservation.start_time + _rules(rules).auto_no_show_after


def is_auto_finish_due(now: datetime, reservation: Reservation,
                       rules: Optional[ReservationRules] = None) -> bool:
    if not _comparable(now, reservation):
        return False
    return (
        reservation.status is ReservationStatus.CONFIRMED
        and now >= reservation.end_time
    )


def window_flags(now: datetime, reservation: Reservation,
                 rules: Optional[ReservationRules] = None) -> dict[str, bool]:
    """All predicates at once, for callers rendering affordances."""
    return {
        "can_check_in": can_check_in(now, reservation, rules),
        "can_late_check_in": can_late_check_in(now, reservation, rules),
        "can_early_return": can_early_return(now, reservation, rules),
        "can_cancel": can_cancel(now, reservation, rules),
        "can_update": can_update(now, reservation, rules),
        "can_owner_delete": can_owner_delete(now, reservation, rules),
        "is_no_show_eligible": is_no_show_eligible(now, reservation, rules),
        "is_auto_finish_due": is_auto_finish_due(now, reservation, rules),
    }
