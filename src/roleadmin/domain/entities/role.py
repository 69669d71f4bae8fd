"""Role entity for RBAC administration."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from roleadmin.domain.entities.permission import Permission
from roleadmin.domain.entities.role_permission import RolePermission


@dataclass
class Role:
    """Role - named set of enabled permissions.

    ``role_permissions`` is persisted and holds at most one entry per
    permission code. ``permissions`` is the full catalog attached on read
    for display and is never written back.
    """

    role_code: str
    role_name: str
    id: UUID | None = None
    role_permissions: list[RolePermission] = field(default_factory=list)
    permissions: list[Permission] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    version: int = 0

    def has_permission(self, permission_code: str) -> bool:
        """True if the permission is associated and enabled."""
        return any(
            rp.permission_code == permission_code and rp.is_enabled
            for rp in self.role_permissions
        )

    def set_permission(self, permission_code: str, is_enabled: bool) -> None:
        """Enable or disable a permission, adding the association if missing."""
        for rp in self.role_permissions:
            if rp.permission_code == permission_code:
                rp.is_enabled = is_enabled
                return
        self.role_permissions.append(
            RolePermission(
                role_code=self.role_code,
                permission_code=permission_code,
                is_enabled=is_enabled,
            )
        )

    @property
    def enabled_permission_codes(self) -> list[str]:
        return [rp.permission_code for rp in self.role_permissions if rp.is_enabled]
