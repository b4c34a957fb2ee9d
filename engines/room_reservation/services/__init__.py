"""
Roombook Room Reservation Engine — Store + Lifecycle Service
============================================================
ReservationLifecycleService answers "can actor X do action Y to
reservation Z right now" and, when it can, writes the new snapshot.

Order of checks for attempt():
    1. load reservation       → NOT_FOUND
    2. authorize actor        → PERMISSION_DENIED
    3. state machine legality → INVALID_TRANSITION
    4. time window            → POLICY_VIOLATION
    5. compare-and-swap write (re-read and re-evaluate on a lost race)

update_reservation() follows the same order, with "open for edits" as
the state check and "before start" as the window.

Rejections are returned as ActionOutcome, never raised.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple

from core.commands.outcomes import ActionOutcome
from core.commands.rejection import (
    RejectionReason, already_banned, invalid_transition, not_found,
    permission_denied, policy_violation,
)
from core.config.rules import ReservationRules
from core.context.actor_context import Actor
from core.permissions.resolver import PermissionResolver
from core.permissions.table import (
    PERMISSION_RESERVATION_CREATE, PERMISSION_RESERVATION_READ,
    PERMISSION_RESERVATION_UPDATE, PERMISSION_SYSTEM_SWEEP,
)
from core.time.temporal import TimeWindow, half_open_overlap, require_aware
from engines.room_reservation import policies
from engines.room_reservation.bans import NoShowBanAccumulator
from engines.room_reservation.commands import (
    ACTION_APPROVE, ACTION_AUTO_FINISH, ACTION_CANCEL, ACTION_CHECK_IN,
    ACTION_CREATE, ACTION_DELETE, ACTION_DETECT_NO_SHOW, ACTION_EARLY_RETURN,
    ACTION_FORCE_STATUS, ACTION_REJECT, ACTION_REPORT_NO_SHOW, ACTION_UPDATE,
    ADMIN_ACTIONS, NO_SHOW_ACTIONS, RESERVATION_ACTIONS, SYSTEM_ACTIONS,
    CreateReservationRequest, UpdateReservationRequest, normalize_action,
)
from engines.room_reservation.errors import SlotUnavailableError, StaleWriteError
from engines.room_reservation.events import (
    BAN_ISSUED_V1, BAN_LIFTED_V1, LATE_RECORDED_V1,
    RESERVATION_APPROVED_V1, RESERVATION_CANCELLED_V1,
    RESERVATION_CHECKED_IN_V1, RESERVATION_CREATED_V1,
    RESERVATION_DELETED_V1, RESERVATION_FINISHED_V1, RESERVATION_NO_SHOW_V1,
    RESERVATION_REJECTED_V1, RESERVATION_RETURNED_EARLY_V1,
    RESERVATION_STATUS_FORCED_V1, RESERVATION_UPDATED_V1,
    ReservationEvent, ban_event, build_status_forced_payload, reservation_event,
)
from engines.room_reservation.models import (
    BanRecord, Reservation, ReservationStatus, Room,
)
from engines.room_reservation.state_machine import (
    apply_transition, check_transition,
)

logger = logging.getLogger("roombook.reservations")

ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})

ACTION_LIFT_BAN = "lift_ban"

ACTION_TO_EVENT_TYPE = {
    ACTION_APPROVE: RESERVATION_APPROVED_V1,
    ACTION_REJECT: RESERVATION_REJECTED_V1,
    ACTION_CHECK_IN: RESERVATION_CHECKED_IN_V1,
    ACTION_EARLY_RETURN: RESERVATION_RETURNED_EARLY_V1,
    ACTION_AUTO_FINISH: RESERVATION_FINISHED_V1,
    ACTION_CANCEL: RESERVATION_CANCELLED_V1,
    ACTION_DETECT_NO_SHOW: RESERVATION_NO_SHOW_V1,
    ACTION_REPORT_NO_SHOW: RESERVATION_NO_SHOW_V1,
    ACTION_DELETE: RESERVATION_DELETED_V1,
}


# ══════════════════════════════════════════════════════════════
# STORAGE CONTRACT
# ══════════════════════════════════════════════════════════════

class ReservationStore(Protocol):
    """
    Storage collaborator.

    commit(), replace_reservation() and delete_reservation() are
    compare-and-swap writes: they raise StaleWriteError when the stored
    version differs from the expected one. add_reservation() and
    replace_reservation() raise SlotUnavailableError when another active
    reservation in the same room overlaps.
    """

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]: ...

    def get_room(self, room_id: str) -> Optional[Room]: ...

    def get_ban_record(self, user_id: str) -> Optional[BanRecord]: ...

    def add_reservation(self, reservation: Reservation) -> Reservation: ...

    def commit(
        self,
        reservation: Reservation,
        expected_version: int,
        ban_record: Optional[BanRecord] = None,
        expected_ban_version: Optional[int] = None,
    ) -> None: ...

    def replace_reservation(self, reservation: Reservation, expected_version: int) -> None: ...

    def save_ban_record(self, record: BanRecord, expected_version: int) -> None: ...

    def delete_reservation(self, reservation_id: str, expected_version: int) -> None: ...

    def list_by_status(self, status: ReservationStatus) -> List[Reservation]: ...


class InMemoryReservationStore:
    """
    Process-local store. One lock guards every read-check-write, which
    is what makes commit() atomic across the reservation and ban rows.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._rooms:        Dict[str, Room]        = {}
        self._reservations: Dict[str, Reservation] = {}
        self._bans:         Dict[str, BanRecord]   = {}

    def add_room(self, room: Room) -> Room:
        with self._lock:
            self._rooms[room.room_id] = room
        return room

    # ── reads ─────────────────────────────────────────────────

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        with self._lock:
            return self._reservations.get(reservation_id)

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def get_ban_record(self, user_id: str) -> Optional[BanRecord]:
        with self._lock:
            return self._bans.get(user_id)

    def list_by_status(self, status: ReservationStatus) -> List[Reservation]:
        status = ReservationStatus.parse(status)
        with self._lock:
            rows = [r for r in self._reservations.values() if r.status is status]
        return sorted(rows, key=lambda r: (r.start_time, r.reservation_id))

    # ── writes ────────────────────────────────────────────────

    def add_reservation(self, reservation: Reservation) -> Reservation:
        with self._lock:
            if reservation.reservation_id in self._reservations:
                raise ValueError(
                    f"reservation '{reservation.reservation_id}' already exists."
                )
            self._check_slot(reservation)
            self._reservations[reservation.reservation_id] = reservation
        return reservation

    def commit(
        self,
        reservation: Reservation,
        expected_version: int,
        ban_record: Optional[BanRecord] = None,
        expected_ban_version: Optional[int] = None,
    ) -> None:
        with self._lock:
            current = self._reservations.get(reservation.reservation_id)
            if current is None or current.version != expected_version:
                raise StaleWriteError(
                    "reservation", reservation.reservation_id, expected_version
                )
            if ban_record is not None:
                self._check_ban_version(ban_record.user_id, expected_ban_version)
            self._reservations[reservation.reservation_id] = reservation
            if ban_record is not None:
                self._bans[ban_record.user_id] = ban_record

    def replace_reservation(self, reservation: Reservation, expected_version: int) -> None:
        with self._lock:
            current = self._reservations.get(reservation.reservation_id)
            if current is None or current.version != expected_version:
                raise StaleWriteError(
                    "reservation", reservation.reservation_id, expected_version
                )
            self._check_slot(reservation)
            self._reservations[reservation.reservation_id] = reservation

    def save_ban_record(self, record: BanRecord, expected_version: int) -> None:
        with self._lock:
            self._check_ban_version(record.user_id, expected_version)
            self._bans[record.user_id] = record

    def delete_reservation(self, reservation_id: str, expected_version: int) -> None:
        with self._lock:
            current = self._reservations.get(reservation_id)
            if current is None or current.version != expected_version:
                raise StaleWriteError("reservation", reservation_id, expected_version)
            del self._reservations[reservation_id]

    def _check_slot(self, reservation: Reservation) -> None:
        if reservation.status not in ACTIVE_STATUSES:
            return
        for other in self._reservations.values():
            if (other.reservation_id != reservation.reservation_id
                    and other.room_id == reservation.room_id
                    and other.status in ACTIVE_STATUSES
                    and half_open_overlap(
                        other.start_time, other.end_time,
                        reservation.start_time, reservation.end_time)):
                raise SlotUnavailableError(reservation.room_id)

    def _check_ban_version(self, user_id: str, expected_version: Optional[int]) -> None:
        stored = self._bans.get(user_id)
        stored_version = 0 if stored is None else stored.version
        expected = 0 if expected_version is None else expected_version
        if stored_version != expected:
            raise StaleWriteError("ban_record", user_id, expected)


# ══════════════════════════════════════════════════════════════
# LIFECYCLE SERVICE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _WritePlan:
    before: Reservation
    after: Optional[Reservation]
    ban_before: Optional[BanRecord] = None
    ban_after: Optional[BanRecord] = None
    events: Tuple[ReservationEvent, ...] = ()

    @property
    def is_delete(self) -> bool:
        return self.after is None


class ReservationLifecycleService:
    def __init__(
        self,
        *,
        store: ReservationStore,
        resolver: PermissionResolver,
        rules: Optional[ReservationRules] = None,
        accumulator: Optional[NoShowBanAccumulator] = None,
    ):
        self._store = store
        self._resolver = resolver
        self._rules = rules if rules is not None else ReservationRules()
        self._bans = (
            accumulator if accumulator is not None
            else NoShowBanAccumulator(self._rules.ban_ladder)
        )

    @property
    def rules(self) -> ReservationRules:
        return self._rules

    @property
    def resolver(self) -> PermissionResolver:
        return self._resolver

    # ══════════════════════════════════════════════════════════
    # attempt()
    # ══════════════════════════════════════════════════════════

    def attempt(
        self,
        actor: Actor,
        reservation_id: str,
        action: str,
        now: datetime,
        *,
        target_status=None,
    ) -> ActionOutcome:
        action = normalize_action(action)
        require_aware(now, "now")
        if target_status is not None:
            target_status = ReservationStatus.parse(target_status)

        for attempt_no in range(1, self._rules.max_write_attempts + 1):
            reservation = self._store.get_reservation(reservation_id)
            plan_or_rejection = self._evaluate(
                actor, reservation_id, reservation, action, now, target_status
            )
            if isinstance(plan_or_rejection, RejectionReason):
                return self._reject(action, now, plan_or_rejection, reservation, actor)

            plan = plan_or_rejection
            try:
                self._write(plan)
            except StaleWriteError as exc:
                logger.info(
                    f"Lost write race on {action} for {reservation_id} "
                    f"(attempt {attempt_no}): {exc}"
                )
                continue

            logger.info(
                f"Accepted {action} on {reservation_id} by {actor.actor_id} "
                f"({plan.before.status.value} → "
                f"{'deleted' if plan.is_delete else plan.after.status.value})"
            )
            return ActionOutcome.accepted(
                action, now,
                reservation=plan.before if plan.is_delete else plan.after,
                ban_record=plan.ban_after,
                events=plan.events,
            )

        reason = invalid_transition(
            f"reservation '{reservation_id}' kept changing concurrently; "
            f"gave up after {self._rules.max_write_attempts} attempts.",
            "compare_and_swap",
        )
        return self._reject(
            action, now, reason, self._store.get_reservation(reservation_id), actor
        )

    def _reject(self, action, now, reason, reservation, actor) -> ActionOutcome:
        logger.info(
            f"Rejected {action} by {actor.actor_id}: "
            f"{reason.code} [{reason.policy_name}] {reason.message}"
        )
        return ActionOutcome.rejected(action, now, reason, reservation=reservation)

    def _evaluate(self, actor, reservation_id, reservation, action, now, target_status):
        if reservation is None:
            return not_found(f"reservation '{reservation_id}' does not exist.")

        rejection = self._authorize(actor, reservation, action)
        if rejection is not None:
            return rejection

        rejection = check_transition(reservation, action, target_status=target_status)
        if rejection is not None:
            return rejection

        rejection, late = self._check_window(actor, action, reservation, now)
        if rejection is not None:
            return rejection

        logger.debug(f"{action} on {reservation_id} passed all checks (late={late})")
        return self._plan(actor, reservation, action, now, target_status, late)

    # ── authorization ─────────────────────────────────────────

    def _authorize(self, actor: Actor, reservation: Reservation,
                   action: str) -> Optional[RejectionReason]:
        resolver = self._resolver
        is_owner = resolver.is_owner(actor, reservation)

        if action in (ACTION_CHECK_IN, ACTION_EARLY_RETURN):
            if is_owner:
                return None
            return permission_denied(
                f"only the owner may {action} reservation "
                f"'{reservation.reservation_id}'.",
                "reservation_owner",
            )

        if action == ACTION_CANCEL:
            if is_owner or resolver.is_admin(actor):
                return None
            return permission_denied(
                f"only the owner or an admin may cancel reservation "
                f"'{reservation.reservation_id}'.",
                "reservation_owner_or_admin",
            )

        if action in ADMIN_ACTIONS:
            required = f"reservation:{action}"
            if not resolver.actor_has_permission(actor, required):
                return permission_denied(
                    f"role '{actor.role.value}' lacks '{required}'.",
                    "reservation_permission",
                )
            if resolver.is_staff(actor):
                return None
            # Owners keep delete for their own rows, bounded by can_owner_delete.
            if action == ACTION_DELETE and is_owner:
                return None
            return permission_denied(
                f"only staff may {action} reservation "
                f"'{reservation.reservation_id}'.",
                "reservation_staff",
            )

        if action == ACTION_REPORT_NO_SHOW:
            if resolver.actor_has_permission(actor, PERMISSION_RESERVATION_READ):
                return None
            return permission_denied(
                f"role '{actor.role.value}' lacks '{PERMISSION_RESERVATION_READ}'.",
                "reservation_permission",
            )

        if action in SYSTEM_ACTIONS:
            if resolver.actor_has_permission(actor, PERMISSION_SYSTEM_SWEEP):
                return None
            return permission_denied(
                f"role '{actor.role.value}' lacks '{PERMISSION_SYSTEM_SWEEP}'.",
                "system_sweep",
            )

        raise ValueError(f"no authorization rule for action '{action}'.")

    # ── time windows ──────────────────────────────────────────

    def _check_window(self, actor: Actor, action: str, reservation: Reservation,
                      now: datetime) -> Tuple[Optional[RejectionReason], bool]:
        rules = self._rules

        if action == ACTION_CHECK_IN:
            if policies.can_check_in(now, reservation, rules):
                return None, False
            if policies.can_late_check_in(now, reservation, rules):
                return None, True
            window = policies.check_in_window(reservation, rules)
            return policy_violation(
                f"check-in is open from {window.start.isoformat()} "
                f"to {window.end.isoformat()}.",
                "check_in_window",
            ), False

        if action == ACTION_EARLY_RETURN:
            if policies.can_early_return(now, reservation, rules):
                return None, False
            return policy_violation(
                "early return is only possible between start and end time.",
                "early_return_window",
            ), False

        if action == ACTION_CANCEL:
            if policies.can_cancel(now, reservation, rules):
                return None, False
            deadline = policies.cancellation_deadline(reservation, rules)
            return policy_violation(
                f"cancellation closed at {deadline.isoformat()}.",
                "cancellation_cutoff",
            ), False

        if action == ACTION_AUTO_FINISH:
            if policies.is_auto_finish_due(now, reservation, rules):
                return None, False
            return policy_violation(
                f"reservation ends at {reservation.end_time.isoformat()}.",
                "auto_finish_due",
            ), False

        if action in NO_SHOW_ACTIONS:
            if policies.is_no_show_eligible(now, reservation, rules):
                return None, False
            return policy_violation(
                f"no-show cannot be reported before {reservation.start_time.isoformat()}.",
                "no_show_eligible",
            ), False

        if action == ACTION_DELETE and not self._resolver.is_staff(actor):
            if policies.can_owner_delete(now, reservation, rules):
                return None, False
            return policy_violation(
                "owners may only delete a closed reservation or one they could still cancel.",
                "owner_delete_window",
            ), False

        return None, False

    # ── plan ──────────────────────────────────────────────────

    def _plan(self, actor, reservation, action, now, target_status, late) -> _WritePlan:
        if action == ACTION_DELETE:
            return _WritePlan(
                before=reservation,
                after=None,
                events=(reservation_event(
                    RESERVATION_DELETED_V1, reservation, actor.actor_id, now),),
            )

        after = apply_transition(
            reservation, action, now, self._rules,
            late=late, target_status=target_status,
        )

        if action == ACTION_FORCE_STATUS:
            event = ReservationEvent(
                event_type=RESERVATION_STATUS_FORCED_V1,
                subject_id=after.reservation_id,
                actor_id=actor.actor_id,
                occurred_at=now,
                payload=build_status_forced_payload(after, reservation.status),
            )
            return _WritePlan(before=reservation, after=after, events=(event,))

        events = [reservation_event(ACTION_TO_EVENT_TYPE[action], after, actor.actor_id, now)]

        ban_before = ban_after = None
        if action in NO_SHOW_ACTIONS:
            ban_before = self._store.get_ban_record(reservation.user_id)
            ban_after = self._bans.record_no_show(ban_before, reservation.user_id, now)
        elif late:
            ban_before = self._store.get_ban_record(reservation.user_id)
            ban_after = self._bans.record_late(ban_before, reservation.user_id, now)
            events.append(ban_event(LATE_RECORDED_V1, ban_after, actor.actor_id, now))

        if ban_after is not None:
            before_bans = 0 if ban_before is None else ban_before.temporary_ban_count
            if ban_after.temporary_ban_count > before_bans:
                events.append(ban_event(BAN_ISSUED_V1, ban_after, actor.actor_id, now))

        return _WritePlan(
            before=reservation,
            after=after,
            ban_before=ban_before,
            ban_after=ban_after,
            events=tuple(events),
        )

    def _write(self, plan: _WritePlan) -> None:
        if plan.is_delete:
            self._store.delete_reservation(
                plan.before.reservation_id, plan.before.version
            )
            return
        self._store.commit(
            plan.after,
            plan.before.version,
            ban_record=plan.ban_after,
            expected_ban_version=(
                None if plan.ban_after is None
                else 0 if plan.ban_before is None
                else plan.ban_before.version
            ),
        )

    # ══════════════════════════════════════════════════════════
    # CREATION
    # ══════════════════════════════════════════════════════════

    def create_reservation(
        self,
        actor: Actor,
        request: CreateReservationRequest,
        now: datetime,
        reservation_id: Optional[str] = None,
    ) -> ActionOutcome:
        require_aware(now, "now")

        if not self._resolver.actor_has_permission(actor, PERMISSION_RESERVATION_CREATE):
            return self._reject(ACTION_CREATE, now, permission_denied(
                f"role '{actor.role.value}' lacks '{PERMISSION_RESERVATION_CREATE}'.",
                "reservation_permission",
            ), None, actor)

        rejection = self._ban_gate(actor.actor_id, now)
        if rejection is not None:
            return self._reject(ACTION_CREATE, now, rejection, None, actor)

        rejection = self._validate_times(request.start_time, request.end_time, now)
        if rejection is not None:
            return self._reject(ACTION_CREATE, now, rejection, None, actor)

        room = self._store.get_room(request.room_id)
        if room is None:
            return self._reject(ACTION_CREATE, now, not_found(
                f"room '{request.room_id}' does not exist.", "room_must_exist",
            ), None, actor)

        reservation = Reservation(
            reservation_id=reservation_id or uuid.uuid4().hex,
            room_id=room.room_id,
            user_id=actor.actor_id,
            title=request.title,
            description=request.description,
            attendees=request.attendees,
            start_time=request.start_time,
            end_time=request.end_time,
            status=(
                ReservationStatus.PENDING if room.requires_approval
                else ReservationStatus.CONFIRMED
            ),
            created_at=now,
        )

        try:
            stored = self._store.add_reservation(reservation)
        except SlotUnavailableError as exc:
            return self._reject(ACTION_CREATE, now, policy_violation(
                str(exc), "slot_unavailable",
            ), None, actor)

        logger.info(
            f"Created {stored.reservation_id} in room {stored.room_id} "
            f"for {stored.user_id} ({stored.status.value})"
        )
        return ActionOutcome.accepted(
            ACTION_CREATE, now,
            reservation=stored,
            events=(reservation_event(RESERVATION_CREATED_V1, stored, actor.actor_id, now),),
        )

    def _ban_gate(self, user_id: str, now: datetime) -> Optional[RejectionReason]:
        for _ in range(self._rules.max_write_attempts):
            record = self._store.get_ban_record(user_id)
            if not self._bans.has_expired_ban(record, now):
                break
            try:
                self._store.save_ban_record(
                    self._bans.clear_expired(record, now), record.version
                )
            except StaleWriteError as exc:
                logger.info(f"Lost ban record race for {user_id}: {exc}")
                continue
            break

        record = self._store.get_ban_record(user_id)
        if record is None or not self._bans.is_banned(record, now):
            return None
        if record.permanent_ban:
            return already_banned(
                f"user '{user_id}' is permanently banned pending review.",
                "permanent_ban",
            )
        return already_banned(
            f"user '{user_id}' is banned until {record.ban_until.isoformat()}.",
            "temporary_ban",
        )

    def _validate_times(self, start_time: datetime, end_time: datetime,
                        now: datetime) -> Optional[RejectionReason]:
        if start_time >= end_time:
            return policy_violation(
                "start_time must be earlier than end_time.", "reservation_time_order",
            )
        if start_time < now:
            return policy_violation(
                "reservations cannot start in the past.", "reservation_not_in_past",
            )
        if TimeWindow(start_time, end_time).duration() > self._rules.max_duration:
            return policy_violation(
                f"reservations may last at most {self._rules.max_duration}.",
                "reservation_max_duration",
            )
        return None

    # ══════════════════════════════════════════════════════════
    # OWNER EDITS
    # ══════════════════════════════════════════════════════════

    def update_reservation(
        self,
        actor: Actor,
        reservation_id: str,
        request: UpdateReservationRequest,
        now: datetime,
    ) -> ActionOutcome:
        """
        Owner edit of title, description, attendees or time slot.

        Same check order as attempt(). A changed slot must satisfy the
        creation time rules and may not overlap another active
        reservation in the room; the reservation itself is excluded.
        """
        require_aware(now, "now")

        for attempt_no in range(1, self._rules.max_write_attempts + 1):
            reservation = self._store.get_reservation(reservation_id)
            updated_or_rejection = self._evaluate_update(
                actor, reservation_id, reservation, request, now
            )
            if isinstance(updated_or_rejection, RejectionReason):
                return self._reject(
                    ACTION_UPDATE, now, updated_or_rejection, reservation, actor
                )

            updated = updated_or_rejection
            try:
                self._store.replace_reservation(updated, reservation.version)
            except StaleWriteError as exc:
                logger.info(
                    f"Lost write race on {ACTION_UPDATE} for {reservation_id} "
                    f"(attempt {attempt_no}): {exc}"
                )
                continue
            except SlotUnavailableError as exc:
                return self._reject(ACTION_UPDATE, now, policy_violation(
                    str(exc), "slot_unavailable",
                ), reservation, actor)

            logger.info(
                f"Updated {reservation_id} by {actor.actor_id} "
                f"({', '.join(sorted(request.changes()))})"
            )
            return ActionOutcome.accepted(
                ACTION_UPDATE, now,
                reservation=updated,
                events=(reservation_event(
                    RESERVATION_UPDATED_V1, updated, actor.actor_id, now),),
            )

        reason = invalid_transition(
            f"reservation '{reservation_id}' kept changing concurrently; "
            f"gave up after {self._rules.max_write_attempts} attempts.",
            "compare_and_swap",
        )
        return self._reject(
            ACTION_UPDATE, now, reason, self._store.get_reservation(reservation_id), actor
        )

    def _evaluate_update(self, actor, reservation_id, reservation, request, now):
        if reservation is None:
            return not_found(f"reservation '{reservation_id}' does not exist.")

        if not self._resolver.actor_has_permission(actor, PERMISSION_RESERVATION_UPDATE):
            return permission_denied(
                f"role '{actor.role.value}' lacks '{PERMISSION_RESERVATION_UPDATE}'.",
                "reservation_permission",
            )
        if not self._resolver.is_owner(actor, reservation):
            return permission_denied(
                f"only the owner may update reservation '{reservation_id}'.",
                "reservation_owner",
            )

        if reservation.is_terminal or reservation.is_checked_in or reservation.is_no_show:
            return invalid_transition(
                f"reservation '{reservation_id}' is no longer open for edits.",
                "update_requires_open_reservation",
            )

        if not policies.can_update(now, reservation, self._rules):
            return policy_violation(
                f"reservation '{reservation_id}' started at "
                f"{reservation.start_time.isoformat()} and can no longer be edited.",
                "update_before_start",
            )

        if request.changes_time:
            rejection = self._validate_times(
                request.start_time or reservation.start_time,
                request.end_time or reservation.end_time,
                now,
            )
            if rejection is not None:
                return rejection

        return reservation.evolve(**request.changes())

    # ══════════════════════════════════════════════════════════
    # BAN REVIEW
    # ══════════════════════════════════════════════════════════

    def lift_ban(self, actor: Actor, user_id: str, now: datetime) -> ActionOutcome:
        require_aware(now, "now")
        if not self._resolver.is_admin(actor):
            return self._reject(ACTION_LIFT_BAN, now, permission_denied(
                "only an admin may lift a ban.", "ban_review",
            ), None, actor)

        record = self._store.get_ban_record(user_id)
        if record is None or (not record.permanent_ban and record.ban_until is None):
            return self._reject(ACTION_LIFT_BAN, now, not_found(
                f"user '{user_id}' has no ban to lift.", "ban_must_exist",
            ), None, actor)

        lifted = self._bans.lift_ban(record)
        try:
            self._store.save_ban_record(lifted, record.version)
        except StaleWriteError as exc:
            return self._reject(ACTION_LIFT_BAN, now, invalid_transition(
                str(exc), "compare_and_swap",
            ), None, actor)

        return ActionOutcome.accepted(
            ACTION_LIFT_BAN, now,
            ban_record=lifted,
            events=(ban_event(BAN_LIFTED_V1, lifted, actor.actor_id, now),),
        )

    # ══════════════════════════════════════════════════════════
    # AFFORDANCES
    # ══════════════════════════════════════════════════════════

    def available_actions(self, actor: Actor, reservation_id: str,
                          now: datetime) -> Tuple[str, ...]:
        """Actions attempt() would accept right now. Nothing is written."""
        reservation = self._store.get_reservation(reservation_id)
        if reservation is None:
            return ()
        accepted = []
        for action in sorted(RESERVATION_ACTIONS - {ACTION_FORCE_STATUS}):
            if self._authorize(actor, reservation, action) is not None:
                continue
            if check_transition(reservation, action) is not None:
                continue
            rejection, _ = self._check_window(actor, action, reservation, now)
            if rejection is None:
                accepted.append(action)
        return tuple(accepted)
