"""Role CSV row DTO."""

from dataclasses import dataclass

from roleadmin.domain.entities import Role


@dataclass(frozen=True)
class RoleCsv:
    """One exported role row."""

    id: str
    role_code: str
    role_name: str
    permissions: str
    created_at: str
    updated_at: str

    HEADER = ("id", "role_code", "role_name", "permissions", "created_at", "updated_at")

    @classmethod
    def from_role(cls, role: Role) -> "RoleCsv":
        return cls(
            id=str(role.id),
            role_code=role.role_code,
            role_name=role.role_name,
            permissions=";".join(sorted(role.enabled_permission_codes)),
            created_at=role.created_at.isoformat() if role.created_at else "",
            updated_at=role.updated_at.isoformat() if role.updated_at else "",
        )

    def as_row(self) -> tuple[str, ...]:
        return (
            self.id,
            self.role_code,
            self.role_name,
            self.permissions,
            self.created_at,
            self.updated_at,
        )
