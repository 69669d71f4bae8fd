"""RolePermission entity - role to permission association."""

from dataclasses import dataclass


@dataclass
class RolePermission:
    """Whether a permission is enabled for a role."""

    role_code: str
    permission_code: str
    is_enabled: bool = False
