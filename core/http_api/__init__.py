"""
Roombook HTTP API - Public API
==============================
"""

from core.http_api.contracts import (
    ActorMetadata,
    BanLiftHttpRequest,
    HttpApiErrorBody,
    HttpApiResponse,
    ReservationActionHttpRequest,
    ReservationCreateHttpRequest,
    ReservationReadRequest,
    ReservationUpdateHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    error_response,
    map_rejection_reason,
    rejection_response,
    success_response,
    HTTP_STATUS_BY_CODE,
    http_status_for,
)
from core.http_api.handlers import (
    get_reservation_affordances,
    post_ban_lift,
    post_reservation_action,
    post_reservation_create,
    post_reservation_update,
)

__all__ = [
    "ActorMetadata",
    "ReservationActionHttpRequest",
    "ReservationCreateHttpRequest",
    "ReservationReadRequest",
    "ReservationUpdateHttpRequest",
    "BanLiftHttpRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "HttpApiDependencies",
    "error_response",
    "success_response",
    "HTTP_STATUS_BY_CODE",
    "http_status_for",
    "map_rejection_reason",
    "rejection_response",
    "post_reservation_action",
    "post_reservation_create",
    "post_reservation_update",
    "post_ban_lift",
    "get_reservation_affordances",
]
