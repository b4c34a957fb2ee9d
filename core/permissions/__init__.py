"""
Roombook Permissions - Public API
=================================
"""

from core.permissions.models import Permission, Role, WILDCARD
from core.permissions.resolver import PermissionResolver
from core.permissions.table import (
    DEFAULT_ROLE_PERMISSIONS,
    PERMISSION_RESERVATION_CREATE,
    PERMISSION_RESERVATION_READ,
    PERMISSION_RESERVATION_UPDATE,
    PERMISSION_SYSTEM_SWEEP,
    PermissionTable,
)

__all__ = [
    "WILDCARD",
    "Role",
    "Permission",
    "PermissionTable",
    "PermissionResolver",
    "DEFAULT_ROLE_PERMISSIONS",
    "PERMISSION_RESERVATION_CREATE",
    "PERMISSION_RESERVATION_READ",
    "PERMISSION_RESERVATION_UPDATE",
    "PERMISSION_SYSTEM_SWEEP",
]
