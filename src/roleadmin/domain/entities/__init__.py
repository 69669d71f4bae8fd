"""Domain entities."""

from roleadmin.domain.entities.permission import Permission
from roleadmin.domain.entities.role import Role
from roleadmin.domain.entities.role_permission import RolePermission

__all__ = [
    "Permission",
    "Role",
    "RolePermission",
]
