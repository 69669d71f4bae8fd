"""Repository ports."""

from roleadmin.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from roleadmin.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "PermissionRepository",
    "RoleRepository",
]
