"""
Roombook Django Adapter Wiring
==============================
Constructs HttpApiDependencies once per process from Django settings.

    ROOM_BOOKING              → ReservationRules (rules_from_mapping)
    ROOM_BOOKING_PERMISSIONS  → PermissionTable (defaults when absent)

Persistence is the ORM-backed DjangoReservationStore.
"""

from __future__ import annotations

import threading

from django.conf import settings

from core.config.rules import rules_from_mapping
from core.http_api.dependencies import HttpApiDependencies
from core.permissions import PermissionResolver, PermissionTable
from core.reservation_store.repository import DjangoReservationStore
from core.time.clock import SystemClock
from engines.room_reservation.services import ReservationLifecycleService

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def _build_permission_table() -> PermissionTable:
    mapping = getattr(settings, "ROOM_BOOKING_PERMISSIONS", None)
    if not mapping:
        return PermissionTable.default()
    return PermissionTable.from_mapping(mapping)


def _create_dependencies() -> HttpApiDependencies:
    rules = rules_from_mapping(getattr(settings, "ROOM_BOOKING", {}))
    store = DjangoReservationStore()
    service = ReservationLifecycleService(
        store=store,
        resolver=PermissionResolver(_build_permission_table()),
        rules=rules,
    )
    return HttpApiDependencies(
        reservation_service=service,
        reservation_store=store,
        clock=SystemClock(),
    )


def build_dependencies() -> HttpApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop the cached wiring so the next call re-reads settings."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
