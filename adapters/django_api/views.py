"""
Roombook Django Adapter Views
=============================
Pass-through HTTP views over core/http_api handlers.

Authentication happens upstream; the resolved identity arrives in the
X-Actor-Id / X-Actor-Role headers.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from django.http import HttpRequest, JsonResponse
from django.utils.dateparse import parse_datetime
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
from core.http_api.contracts import (
    ActorMetadata,
    BanLiftHttpRequest,
    ReservationActionHttpRequest,
    ReservationCreateHttpRequest,
    ReservationReadRequest,
    ReservationUpdateHttpRequest,
)
from core.http_api.errors import error_response, http_status_for
from core.http_api.handlers import (
    get_reservation_affordances,
    post_ban_lift,
    post_reservation_action,
    post_reservation_create,
    post_reservation_update,
)


def _json_payload(payload: dict[str, Any]) -> JsonResponse:
    return JsonResponse(payload, status=http_status_for(payload))


def _json_error(code: str, message: str) -> JsonResponse:
    return _json_payload(error_response(code=code, message=message, details={}))


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _parse_datetime(value: Any, field_name: str) -> datetime:
    parsed = parse_datetime(value) if isinstance(value, str) else None
    if parsed is None:
        raise ValueError(f"{field_name} must be an ISO-8601 datetime.")
    return parsed


def _actor_from_request(request: HttpRequest) -> ActorMetadata:
    actor_id = request.headers.get("X-Actor-Id")
    role = request.headers.get("X-Actor-Role")
    if not actor_id or not role:
        raise ValueError("X-Actor-Id and X-Actor-Role headers are required.")
    return ActorMetadata(actor_id=actor_id, role=role)


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
    )


@csrf_exempt
def reservation_create_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    try:
        body = _parse_json_body(request)
        contract = ReservationCreateHttpRequest(
            actor=_actor_from_request(request),
            room_id=body["room_id"],
            title=body["title"],
            start_time=_parse_datetime(body.get("start_time"), "start_time"),
            end_time=_parse_datetime(body.get("end_time"), "end_time"),
            description=body.get("description", ""),
            attendees=int(body.get("attendees", 0)),
        )
    except (ValueError, KeyError) as exc:
        return _json_error("INVALID_REQUEST", str(exc))
    return _json_payload(post_reservation_create(contract, build_dependencies()))


@csrf_exempt
def reservation_action_view(request: HttpRequest, reservation_id: str, action: str) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    try:
        body = _parse_json_body(request)
        contract = ReservationActionHttpRequest(
            actor=_actor_from_request(request),
            reservation_id=reservation_id,
            action=action,
            target_status=body.get("target_status"),
        )
    except (ValueError, KeyError) as exc:
        return _json_error("INVALID_REQUEST", str(exc))
    return _json_payload(post_reservation_action(contract, build_dependencies()))


@csrf_exempt
def reservation_detail_view(request: HttpRequest, reservation_id: str) -> JsonResponse:
    if request.method == "PATCH":
        return _reservation_update(request, reservation_id)
    if request.method != "GET":
        return _method_not_allowed()
    try:
        contract = ReservationReadRequest(
            actor=_actor_from_request(request),
            reservation_id=reservation_id,
        )
    except ValueError as exc:
        return _json_error("INVALID_REQUEST", str(exc))
    return _json_payload(get_reservation_affordances(contract, build_dependencies()))


def _optional_datetime(body: dict[str, Any], field_name: str) -> Optional[datetime]:
    if body.get(field_name) is None:
        return None
    return _parse_datetime(body[field_name], field_name)


def _reservation_update(request: HttpRequest, reservation_id: str) -> JsonResponse:
    try:
        body = _parse_json_body(request)
        attendees = body.get("attendees")
        contract = ReservationUpdateHttpRequest(
            actor=_actor_from_request(request),
            reservation_id=reservation_id,
            title=body.get("title"),
            description=body.get("description"),
            start_time=_optional_datetime(body, "start_time"),
            end_time=_optional_datetime(body, "end_time"),
            attendees=None if attendees is None else int(attendees),
        )
    except ValueError as exc:
        return _json_error("INVALID_REQUEST", str(exc))
    return _json_payload(post_reservation_update(contract, build_dependencies()))


@csrf_exempt
def ban_lift_view(request: HttpRequest, user_id: str) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    try:
        contract = BanLiftHttpRequest(
            actor=_actor_from_request(request),
            user_id=user_id,
        )
    except ValueError as exc:
        return _json_error("INVALID_REQUEST", str(exc))
    return _json_payload(post_ban_lift(contract, build_dependencies()))
