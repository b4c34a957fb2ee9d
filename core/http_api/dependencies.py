"""
Roombook HTTP API - Dependencies
================================
Injected collaborators for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.time.clock import Clock


@dataclass(frozen=True)
class HttpApiDependencies:
    reservation_service: object
    reservation_store: object
    clock: Clock
