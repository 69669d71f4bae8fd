"""Application services."""

from roleadmin.application.services.permission_service import PermissionService
from roleadmin.application.services.role_service import RoleService

__all__ = [
    "PermissionService",
    "RoleService",
]
