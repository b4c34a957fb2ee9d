"""
Roombook Context - Actor
========================
Immutable identity of whoever is acting on a reservation.

The caller authenticates and resolves the role before building an
Actor; the core never looks identities up on its own.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.permissions.models import Role

ACTOR_TYPE_HUMAN = "HUMAN"
ACTOR_TYPE_SYSTEM = "SYSTEM"

VALID_ACTOR_TYPES = frozenset({ACTOR_TYPE_HUMAN, ACTOR_TYPE_SYSTEM})

SYSTEM_ACTOR_ID = "system"


@dataclass(frozen=True)
class Actor:
    """
    Canonical actor for one request.

    Fields:
        actor_id:   Identity of the user (matches Reservation.user_id).
        role:       Role enum; strings are parsed at construction.
        actor_type: HUMAN | SYSTEM. SYSTEM actors drive scheduled sweeps.
    """

    actor_id: str
    role: Role
    actor_type: str = ACTOR_TYPE_HUMAN

    def __post_init__(self):
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")

        object.__setattr__(self, "role", Role.parse(self.role))

        if self.actor_type not in VALID_ACTOR_TYPES:
            raise ValueError(
                f"actor_type '{self.actor_type}' not valid. "
                f"Must be one of: {sorted(VALID_ACTOR_TYPES)}"
            )

    @classmethod
    def system(cls) -> "Actor":
        return cls(
            actor_id=SYSTEM_ACTOR_ID,
            role=Role.ADMIN,
            actor_type=ACTOR_TYPE_SYSTEM,
        )

    @property
    def is_system(self) -> bool:
        return self.actor_type == ACTOR_TYPE_SYSTEM
