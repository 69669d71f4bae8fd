"""Search criteria for paged queries."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RoleCriteria:
    """Filter for roles. Soft-deleted roles never match."""

    id: UUID | None = None
    role_code: str | None = None
    role_name: str | None = None


@dataclass(frozen=True)
class PermissionCriteria:
    """Filter for permission catalog entries."""

    permission_code: str | None = None
    description: str | None = None
