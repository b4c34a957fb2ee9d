"""
Roombook Room Reservation Engine — Scheduler Sweep
==================================================
One pass of the time-triggered actions. The scheduler (cron, celery
beat, a management command) calls run_sweep() periodically; the core
owns no timers of its own.

Every transition still goes through ReservationLifecycleService.attempt()
with the system actor, so a reservation that changed since it was
listed is rejected rather than overwritten.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from core.context.actor_context import Actor
from engines.room_reservation import policies
from engines.room_reservation.commands import ACTION_AUTO_FINISH, ACTION_DETECT_NO_SHOW
from engines.room_reservation.models import ReservationStatus

logger = logging.getLogger("roombook.sweeper")


@dataclass
class SweepSummary:
    finished: List[str] = field(default_factory=list)
    no_shows: List[str] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "finished": list(self.finished),
            "no_shows": list(self.no_shows),
            "rejected": list(self.rejected),
        }


def run_sweep(service, store, now: datetime) -> SweepSummary:
    actor = Actor.system()
    rules = service.rules
    summary = SweepSummary()

    for reservation in store.list_by_status(ReservationStatus.CONFIRMED):
        if policies.is_auto_no_show_due(now, reservation, rules):
            action, bucket = ACTION_DETECT_NO_SHOW, summary.no_shows
        elif policies.is_auto_finish_due(now, reservation, rules):
            action, bucket = ACTION_AUTO_FINISH, summary.finished
        else:
            continue

        outcome = service.attempt(actor, reservation.reservation_id, action, now)
        if outcome.is_accepted:
            bucket.append(reservation.reservation_id)
        else:
            summary.rejected.append(reservation.reservation_id)

    logger.info(
        f"Sweep at {now.isoformat()}: {len(summary.finished)} finished, "
        f"{len(summary.no_shows)} no-shows, {len(summary.rejected)} rejected"
    )
    return summary
