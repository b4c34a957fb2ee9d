"""
Roombook Permissions - Role and Permission Value Objects
========================================================
Closed role enumeration and structured permission tokens.

A permission token has the form:
    resource:action     (e.g. reservation:create)
    resource:*          (every action on a resource)
    *                   (global wildcard)

Everything after the first colon is the action, so nested tokens such
as 'club:member:*' keep 'member:*' as their action.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

WILDCARD = "*"


class Role(Enum):
    STUDENT = "student"
    STAFF = "staff"
    CLUB_LEADER = "club_leader"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value) -> "Role":
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            raise ValueError(f"role must be a string, got {type(value).__name__}.")
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise ValueError(
                f"role '{value}' not valid. "
                f"Must be one of: {sorted(r.value for r in cls)}"
            ) from exc

    @classmethod
    def try_parse(cls, value) -> "Role | None":
        try:
            return cls.parse(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class Permission:
    resource: str
    action: str = ""

    def __post_init__(self):
        if not isinstance(self.resource, str) or not self.resource:
            raise ValueError("resource must be a non-empty string.")
        if not isinstance(self.action, str):
            raise ValueError("action must be a string.")

        if self.resource == WILDCARD:
            if self.action:
                raise ValueError("global wildcard '*' takes no action.")
            return

        if ":" in self.resource:
            raise ValueError("resource must not contain ':'.")
        if not self.action:
            raise ValueError(
                f"permission on '{self.resource}' requires an action."
            )

    @classmethod
    def parse(cls, token) -> "Permission":
        if isinstance(token, Permission):
            return token
        if not isinstance(token, str) or not token.strip():
            raise ValueError("permission must be a non-empty string.")
        token = token.strip()
        if token == WILDCARD:
            return cls(resource=WILDCARD)
        resource, sep, action = token.partition(":")
        if not sep:
            raise ValueError(
                f"permission '{token}' must follow resource:action format."
            )
        return cls(resource=resource, action=action)

    @property
    def is_global_wildcard(self) -> bool:
        return self.resource == WILDCARD

    @property
    def is_resource_wildcard(self) -> bool:
        return self.action == WILDCARD

    def resource_wildcard(self) -> "Permission":
        return Permission(resource=self.resource, action=WILDCARD)

    def __str__(self) -> str:
        if self.is_global_wildcard:
            return WILDCARD
        return f"{self.resource}:{self.action}"
