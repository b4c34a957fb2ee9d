"""
Roombook Permissions - Permission Resolver
==========================================
Pure role → permission decisions. Never consults reservation or ban
state; the only reservation-aware query is the ownership predicate,
which compares identifiers and nothing else.

Matching rules for has_permission(role, "resource:action"):
    0. unknown role or malformed token → False
    1. admin → always True
    2. literal token present in the role's set
    3. 'resource:*' present
    4. '*' present
No regex, no hierarchy beyond the single wildcard level.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from core.permissions.models import Permission, Role, WILDCARD
from core.permissions.table import PermissionTable

if TYPE_CHECKING:
    from core.context.actor_context import Actor

logger = logging.getLogger("roombook.permissions")

_GLOBAL_WILDCARD = Permission(resource=WILDCARD)


class PermissionResolver:
    def __init__(self, table: PermissionTable):
        if not isinstance(table, PermissionTable):
            raise TypeError(
                f"table must be PermissionTable, got {type(table).__name__}."
            )
        self._table = table

    @property
    def table(self) -> PermissionTable:
        return self._table

    def has_permission(self, role, permission) -> bool:
        resolved_role = role if isinstance(role, Role) else Role.try_parse(role)
        if resolved_role is None:
            logger.debug(f"Unknown role {role!r} resolved to deny-all.")
            return False

        if resolved_role is Role.ADMIN:
            return True

        try:
            required = Permission.parse(permission)
        except ValueError as exc:
            logger.debug(f"Malformed permission {permission!r} resolved to deny: {exc}")
            return False

        if self._table.contains(resolved_role, required):
            return True
        if not required.is_global_wildcard and self._table.contains(
            resolved_role, required.resource_wildcard()
        ):
            return True
        if self._table.contains(resolved_role, _GLOBAL_WILDCARD):
            return True

        logger.debug(f"Role '{resolved_role.value}' lacks '{required}'.")
        return False

    def actor_has_permission(self, actor: Actor, permission) -> bool:
        return self.has_permission(actor.role, permission)

    # ── role queries ──────────────────────────────────────────

    @staticmethod
    def has_role(actor: Actor, role) -> bool:
        return actor.role is Role.parse(role)

    @staticmethod
    def has_any_role(actor: Actor, roles: Iterable) -> bool:
        return any(actor.role is Role.parse(role) for role in roles)

    @classmethod
    def is_admin(cls, actor: Actor) -> bool:
        return cls.has_role(actor, Role.ADMIN)

    @classmethod
    def is_staff(cls, actor: Actor) -> bool:
        return cls.has_any_role(actor, (Role.STAFF, Role.ADMIN))

    @classmethod
    def is_club_leader(cls, actor: Actor) -> bool:
        return cls.has_any_role(actor, (Role.CLUB_LEADER, Role.ADMIN))

    # ── ownership ─────────────────────────────────────────────

    @staticmethod
    def is_owner(actor: Actor, reservation) -> bool:
        """True when the actor created the reservation."""
        if actor.is_system:
            return False
        return str(reservation.user_id) == actor.actor_id
