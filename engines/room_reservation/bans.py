"""
Roombook Room Reservation Engine — No-Show Ban Accumulator
==========================================================
Turns no-show and late check-in infractions into a per-user ban record.

Ladder (BanLadder defaults):
    every 3rd no-show        → ban, temporary_ban_count += 1
    ban number 1..2          → ban_until = now + 7 days
    ban number 3             → permanent_ban (manual review to lift)
    every 3rd late check-in  → counts as one no-show

Pure: takes a record (or None) and returns a new one. Persisting is
the lifecycle service's job.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from core.config.rules import BanLadder
from core.time.temporal import require_aware
from engines.room_reservation.models import BanRecord

logger = logging.getLogger("roombook.bans")


class BanState(Enum):
    NONE = "none"
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class NoShowBanAccumulator:
    def __init__(self, ladder: Optional[BanLadder] = None):
        self._ladder = ladder if ladder is not None else BanLadder()

    @property
    def ladder(self) -> BanLadder:
        return self._ladder

    # ══════════════════════════════════════════════════════════
    # INFRACTIONS
    # ══════════════════════════════════════════════════════════

    def record_no_show(
        self,
        record: Optional[BanRecord],
        user_id: str,
        now: datetime,
    ) -> BanRecord:
        """Count one no-show and issue a ban on every ladder step."""
        require_aware(now, "now")
        current = self._current(record, user_id)

        no_show_count = current.no_show_count + 1
        updated = current.evolve(no_show_count=no_show_count, last_no_show_at=now)

        if no_show_count % self._ladder.strikes_per_ban == 0:
            updated = self._issue_ban(updated, now)
        return updated

    def record_late(
        self,
        record: Optional[BanRecord],
        user_id: str,
        now: datetime,
    ) -> BanRecord:
        """Count one late check-in; a full set of lates becomes a no-show."""
        require_aware(now, "now")
        current = self._current(record, user_id)

        late_count = current.late_count + 1
        if late_count < self._ladder.lates_per_no_show:
            return current.evolve(late_count=late_count)

        logger.info(
            f"User {current.user_id}: {late_count} late check-ins counted as a no-show"
        )
        reset = current.evolve(late_count=0)
        return self.record_no_show(reset, current.user_id, now).evolve(
            version=current.version + 1
        )

    def _issue_ban(self, record: BanRecord, now: datetime) -> BanRecord:
        ban_number = record.temporary_ban_count + 1
        if ban_number >= self._ladder.bans_before_permanent:
            logger.info(
                f"User {record.user_id}: permanent ban after "
                f"{record.no_show_count} no-shows (ban #{ban_number})"
            )
            return record.evolve(
                temporary_ban_count=ban_number,
                permanent_ban=True,
                ban_until=None,
                version=record.version,
            )

        ban_until = now + self._ladder.ban_duration
        logger.info(
            f"User {record.user_id}: banned until {ban_until.isoformat()} "
            f"after {record.no_show_count} no-shows (ban #{ban_number})"
        )
        return record.evolve(
            temporary_ban_count=ban_number,
            ban_until=ban_until,
            version=record.version,
        )

    @staticmethod
    def _current(record: Optional[BanRecord], user_id: str) -> BanRecord:
        if record is None:
            return BanRecord.empty(user_id)
        if record.user_id != user_id:
            raise ValueError(
                f"ban record belongs to '{record.user_id}', not '{user_id}'."
            )
        return record

    # ══════════════════════════════════════════════════════════
    # STATE
    # ══════════════════════════════════════════════════════════

    @staticmethod
    def ban_state(record: Optional[BanRecord], now: datetime) -> BanState:
        if record is None:
            return BanState.NONE
        if record.permanent_ban:
            return BanState.PERMANENT
        if record.ban_until is not None and now < record.ban_until:
            return BanState.TEMPORARY
        return BanState.NONE

    def is_banned(self, record: Optional[BanRecord], now: datetime) -> bool:
        return self.ban_state(record, now) is not BanState.NONE

    @staticmethod
    def has_expired_ban(record: Optional[BanRecord], now: datetime) -> bool:
        """A temporary ban whose end has passed but is still on the record."""
        return (
            record is not None
            and not record.permanent_ban
            and record.ban_until is not None
            and now >= record.ban_until
        )

    def clear_expired(self, record: BanRecord, now: datetime) -> BanRecord:
        if not self.has_expired_ban(record, now):
            return record
        logger.info(f"User {record.user_id}: temporary ban expired, lifted")
        return record.evolve(ban_until=None)

    @staticmethod
    def lift_ban(record: BanRecord) -> BanRecord:
        """Manual review: clears the ban, keeps the infraction counters."""
        logger.info(f"User {record.user_id}: ban lifted by review")
        return record.evolve(ban_until=None, permanent_ban=False)
