"""Role form DTOs - per-request input bound from HTML forms."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from roleadmin.domain.entities import Permission, Role, RolePermission
from roleadmin.domain.value_objects import RoleCriteria

ROLE_CODE_PATTERN = r"^[A-Za-z0-9_]+$"


class RoleForm(BaseModel):
    """Input for creating or editing a role."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID | None = None
    role_code: str = Field(min_length=1, max_length=50, pattern=ROLE_CODE_PATTERN)
    role_name: str = Field(min_length=1, max_length=100)
    permissions: dict[str, bool] = Field(default_factory=dict)
    version: int | None = None

    @property
    def is_new(self) -> bool:
        return self.id is None

    @classmethod
    def empty(cls) -> "RoleForm":
        """Blank form for the create screen (not validated)."""
        return cls.model_construct(role_code="", role_name="", permissions={})

    @classmethod
    def from_role(cls, role: Role, catalog: list[Permission]) -> "RoleForm":
        """Map a persisted role and the catalog into an edit form."""
        return cls.model_construct(
            id=role.id,
            role_code=role.role_code,
            role_name=role.role_name,
            permissions={
                p.permission_code: role.has_permission(p.permission_code) for p in catalog
            },
            version=role.version,
        )

    def to_role(self) -> Role:
        """Build a new role with one association per submitted permission code."""
        return Role(
            role_code=self.role_code,
            role_name=self.role_name,
            role_permissions=[
                RolePermission(
                    role_code=self.role_code,
                    permission_code=code,
                    is_enabled=enabled,
                )
                for code, enabled in self.permissions.items()
            ],
        )

    def apply_to(self, role: Role) -> Role:
        """Copy flags and editable fields onto a persisted role.

        The role code is fixed at creation and is not copied.
        """
        for code, enabled in self.permissions.items():
            role.set_permission(code, enabled)
        role.role_name = self.role_name
        if self.version is not None:
            role.version = self.version
        return role


class SearchRoleForm(BaseModel):
    """Input for the role search screen."""

    model_config = ConfigDict(str_strip_whitespace=True)

    role_code: str | None = Field(default=None, max_length=50)
    role_name: str | None = Field(default=None, max_length=100)

    def to_criteria(self) -> RoleCriteria:
        return RoleCriteria(
            role_code=self.role_code or None,
            role_name=self.role_name or None,
        )

    def to_query(self) -> dict[str, str]:
        """Non-empty fields as query string parameters."""
        return {k: v for k, v in self.model_dump().items() if v}
