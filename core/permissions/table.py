"""
Roombook Permissions - Immutable Role Permission Table
======================================================
Role → ordered permissions, built once at process start and injected
into the resolver. The table is never mutated at runtime.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from core.permissions.models import Permission, Role

PERMISSION_RESERVATION_CREATE = "reservation:create"
PERMISSION_RESERVATION_READ = "reservation:read"
PERMISSION_RESERVATION_UPDATE = "reservation:update"
PERMISSION_SYSTEM_SWEEP = "system:sweep"

DEFAULT_ROLE_PERMISSIONS: dict[str, tuple[str, ...]] = {
    Role.STUDENT.value: (
        "reservation:create",
        "reservation:read",
        "reservation:update",
        "reservation:delete",
        "club:read",
        "club:join",
        "room:read",
        "stats:read",
    ),
    Role.STAFF.value: (
        "reservation:*",
        "club:read",
        "club:create",
        "club:join",
        "room:*",
        "stats:read",
        "user:read",
    ),
    Role.CLUB_LEADER.value: (
        "reservation:*",
        "club:read",
        "club:create",
        "club:update",
        "club:member:*",
        "room:*",
        "stats:read",
        "user:read",
    ),
    Role.ADMIN.value: ("*",),
}


def _dedupe(permissions: Iterable[Permission]) -> tuple[Permission, ...]:
    seen: set[Permission] = set()
    ordered: list[Permission] = []
    for permission in permissions:
        if permission in seen:
            continue
        seen.add(permission)
        ordered.append(permission)
    return tuple(ordered)


class PermissionTable:
    """
    Read-only role → permission mapping.

    Roles missing from the table resolve to an empty tuple (deny-all).
    Declaration order of each role's permissions is preserved.
    """

    __slots__ = ("_grants", "_index")

    def __init__(self, grants: Mapping[Role, Iterable[Permission]]):
        frozen: dict[Role, tuple[Permission, ...]] = {}
        for role, permissions in grants.items():
            if not isinstance(role, Role):
                raise TypeError(
                    f"table keys must be Role, got {type(role).__name__}."
                )
            permissions = tuple(permissions)
            for permission in permissions:
                if not isinstance(permission, Permission):
                    raise TypeError(
                        "table values must be iterables of Permission."
                    )
            frozen[role] = _dedupe(permissions)

        self._grants = MappingProxyType(frozen)
        self._index = MappingProxyType(
            {role: frozenset(perms) for role, perms in frozen.items()}
        )

    def __setattr__(self, name, value):
        if hasattr(self, "_index"):
            raise AttributeError("PermissionTable is immutable.")
        object.__setattr__(self, name, value)

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, Iterable[str]]
    ) -> "PermissionTable":
        """Build a table from plain strings, e.g. Django settings."""
        grants: dict[Role, tuple[Permission, ...]] = {}
        for role_name, tokens in mapping.items():
            if isinstance(tokens, str):
                raise ValueError(
                    f"permissions for role '{role_name}' must be a list, "
                    f"not a string."
                )
            role = Role.parse(role_name)
            grants[role] = tuple(Permission.parse(token) for token in tokens)
        return cls(grants)

    @classmethod
    def default(cls) -> "PermissionTable":
        return cls.from_mapping(DEFAULT_ROLE_PERMISSIONS)

    def permissions_for(self, role: Role) -> tuple[Permission, ...]:
        return self._grants.get(role, tuple())

    def contains(self, role: Role, permission: Permission) -> bool:
        return permission in self._index.get(role, frozenset())

    def roles(self) -> tuple[Role, ...]:
        return tuple(self._grants.keys())

    def to_dict(self) -> dict[str, list[str]]:
        return {
            role.value: [str(p) for p in permissions]
            for role, permissions in self._grants.items()
        }
