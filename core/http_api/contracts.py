"""
Roombook HTTP API - Contracts
=============================
Framework-agnostic request/response DTOs for reservation endpoints.
The caller authenticates and resolves the role before building them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from core.time.temporal import require_aware


@dataclass(frozen=True)
class ActorMetadata:
    actor_id: str
    role: str
    actor_type: str = "HUMAN"

    def __post_init__(self):
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")
        if not self.role or not isinstance(self.role, str):
            raise ValueError("role must be a non-empty string.")
        if not self.actor_type or not isinstance(self.actor_type, str):
            raise ValueError("actor_type must be a non-empty string.")


@dataclass(frozen=True)
class ReservationActionHttpRequest:
    actor: ActorMetadata
    reservation_id: str
    action: str
    target_status: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.actor, ActorMetadata):
            raise ValueError("actor must be ActorMetadata.")
        if not self.reservation_id or not isinstance(self.reservation_id, str):
            raise ValueError("reservation_id must be a non-empty string.")
        if not self.action or not isinstance(self.action, str):
            raise ValueError("action must be a non-empty string.")
        if self.target_status is not None and not isinstance(self.target_status, str):
            raise ValueError("target_status must be a string or None.")


@dataclass(frozen=True)
class ReservationCreateHttpRequest:
    actor: ActorMetadata
    room_id: str
    title: str
    start_time: datetime
    end_time: datetime
    description: str = ""
    attendees: int = 0

    def __post_init__(self):
        if not isinstance(self.actor, ActorMetadata):
            raise ValueError("actor must be ActorMetadata.")
        if not self.room_id or not isinstance(self.room_id, str):
            raise ValueError("room_id must be a non-empty string.")
        if not self.title or not isinstance(self.title, str):
            raise ValueError("title must be a non-empty string.")
        require_aware(self.start_time, "start_time")
        require_aware(self.end_time, "end_time")


@dataclass(frozen=True)
class ReservationUpdateHttpRequest:
    actor: ActorMetadata
    reservation_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    attendees: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.actor, ActorMetadata):
            raise ValueError("actor must be ActorMetadata.")
        if not self.reservation_id or not isinstance(self.reservation_id, str):
            raise ValueError("reservation_id must be a non-empty string.")
        require_aware(self.start_time, "start_time", optional=True)
        require_aware(self.end_time, "end_time", optional=True)


@dataclass(frozen=True)
class ReservationReadRequest:
    actor: ActorMetadata
    reservation_id: str

    def __post_init__(self):
        if not isinstance(self.actor, ActorMetadata):
            raise ValueError("actor must be ActorMetadata.")
        if not self.reservation_id or not isinstance(self.reservation_id, str):
            raise ValueError("reservation_id must be a non-empty string.")


@dataclass(frozen=True)
class BanLiftHttpRequest:
    actor: ActorMetadata
    user_id: str

    def __post_init__(self):
        if not isinstance(self.actor, ActorMetadata):
            raise ValueError("actor must be ActorMetadata.")
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")


@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        if self.error is None:
            raise ValueError("error must be set when ok is False.")
        return {"ok": False, "error": self.error.to_dict()}
