"""
Roombook HTTP API - Handlers
============================
Transport-agnostic handlers over ReservationLifecycleService.

Each handler takes a request contract plus HttpApiDependencies and
returns {"ok": True, "data": ...} or {"ok": False, "error": ...}.
Rejections keep their code and policy_name; nothing is localized here.
"""

from __future__ import annotations

from typing import Any

from core.commands.outcomes import ActionOutcome
from core.commands.rejection import RejectionReason, permission_denied
from core.context.actor_context import Actor
from core.http_api.contracts import (
    ActorMetadata,
    BanLiftHttpRequest,
    ReservationActionHttpRequest,
    ReservationCreateHttpRequest,
    ReservationReadRequest,
    ReservationUpdateHttpRequest,
)
from core.http_api.errors import error_response, rejection_response, success_response
from core.permissions.models import Role
from core.config.rules import rules_to_mapping
from engines.room_reservation.commands import (
    CreateReservationRequest, UpdateReservationRequest,
)
from engines.room_reservation.policies import window_flags


def _resolve_actor(metadata: ActorMetadata) -> Actor | RejectionReason:
    # Unknown roles hold no permissions at all.
    if Role.try_parse(metadata.role) is None:
        return permission_denied(
            f"role '{metadata.role}' is not recognised.",
            "role_must_be_known",
        )
    return Actor(
        actor_id=metadata.actor_id,
        role=metadata.role,
        actor_type=metadata.actor_type,
    )


def _serialize_outcome(outcome: ActionOutcome) -> dict[str, Any]:
    return {
        "action": outcome.action,
        "status": outcome.status.value,
        "occurred_at": outcome.occurred_at.isoformat(),
        "reservation": (
            None if outcome.reservation is None else outcome.reservation.to_dict()
        ),
        "ban_record": (
            None if outcome.ban_record is None else outcome.ban_record.to_dict()
        ),
        "events": [event.to_dict() for event in outcome.events],
    }


def _outcome_response(outcome: ActionOutcome, **extra_details) -> dict[str, Any]:
    if outcome.is_rejected:
        return rejection_response(
            outcome.reason,
            extra_details={"action": outcome.action, **extra_details},
        )
    return success_response(_serialize_outcome(outcome))


def _run_write(write_call) -> dict[str, Any]:
    try:
        return write_call()
    except ValueError as exc:
        return error_response(
            code="INVALID_REQUEST",
            message=str(exc),
            details={},
        )
    except Exception as exc:
        return error_response(
            code="HANDLER_EXECUTION_FAILED",
            message="Failed to execute reservation action.",
            details={"error_type": type(exc).__name__},
        )


def _as_actor(metadata: ActorMetadata, call) -> dict[str, Any]:
    def _call():
        actor = _resolve_actor(metadata)
        if isinstance(actor, RejectionReason):
            return rejection_response(actor)
        return call(actor)

    return _run_write(_call)


# ══════════════════════════════════════════════════════════════
# WRITES
# ══════════════════════════════════════════════════════════════

def post_reservation_action(
    request: ReservationActionHttpRequest,
    dependencies,
) -> dict[str, Any]:
    def _call(actor):
        outcome = dependencies.reservation_service.attempt(
            actor,
            request.reservation_id,
            request.action,
            dependencies.clock.now_utc(),
            target_status=request.target_status,
        )
        return _outcome_response(outcome, reservation_id=request.reservation_id)

    return _as_actor(request.actor, _call)


def post_reservation_create(
    request: ReservationCreateHttpRequest,
    dependencies,
) -> dict[str, Any]:
    def _call(actor):
        outcome = dependencies.reservation_service.create_reservation(
            actor,
            CreateReservationRequest(
                room_id=request.room_id,
                title=request.title,
                start_time=request.start_time,
                end_time=request.end_time,
                description=request.description,
                attendees=request.attendees,
            ),
            dependencies.clock.now_utc(),
        )
        return _outcome_response(outcome, room_id=request.room_id)

    return _as_actor(request.actor, _call)


def post_reservation_update(
    request: ReservationUpdateHttpRequest,
    dependencies,
) -> dict[str, Any]:
    def _call(actor):
        outcome = dependencies.reservation_service.update_reservation(
            actor,
            request.reservation_id,
            UpdateReservationRequest(
                title=request.title,
                description=request.description,
                start_time=request.start_time,
                end_time=request.end_time,
                attendees=request.attendees,
            ),
            dependencies.clock.now_utc(),
        )
        return _outcome_response(outcome, reservation_id=request.reservation_id)

    return _as_actor(request.actor, _call)


def post_ban_lift(
    request: BanLiftHttpRequest,
    dependencies,
) -> dict[str, Any]:
    def _call(actor):
        outcome = dependencies.reservation_service.lift_ban(
            actor, request.user_id, dependencies.clock.now_utc(),
        )
        return _outcome_response(outcome, user_id=request.user_id)

    return _as_actor(request.actor, _call)


# ══════════════════════════════════════════════════════════════
# READS
# ══════════════════════════════════════════════════════════════

def get_reservation_affordances(
    request: ReservationReadRequest,
    dependencies,
) -> dict[str, Any]:
    """Reservation snapshot plus what the actor may do with it right now."""
    def _call(actor):
        reservation = dependencies.reservation_store.get_reservation(
            request.reservation_id
        )
        if reservation is None:
            return error_response(
                code="NOT_FOUND",
                message=f"reservation '{request.reservation_id}' does not exist.",
                details={"policy_name": "reservation_must_exist"},
            )

        service = dependencies.reservation_service
        now = dependencies.clock.now_utc()
        return success_response({
            "reservation": reservation.to_dict(),
            "windows": window_flags(now, reservation, service.rules),
            "rules": rules_to_mapping(service.rules),
            "available_actions": list(
                service.available_actions(actor, request.reservation_id, now)
            ),
        })

    return _as_actor(request.actor, _call)
