"""
Roombook Context - Public API
=============================
Request-scoped actor identity.
"""

from core.context.actor_context import (
    ACTOR_TYPE_HUMAN,
    ACTOR_TYPE_SYSTEM,
    SYSTEM_ACTOR_ID,
    Actor,
)

__all__ = [
    "Actor",
    "ACTOR_TYPE_HUMAN",
    "ACTOR_TYPE_SYSTEM",
    "SYSTEM_ACTOR_ID",
]
