"""Role repository port."""

from typing import Protocol
from uuid import UUID

from roleadmin.domain.entities import Role
from roleadmin.domain.value_objects import Page, Pageable, RoleCriteria


class RoleRepository(Protocol):
    """Port for role persistence. Reads exclude soft-deleted roles."""

    async def find_all(self, criteria: RoleCriteria, pageable: Pageable) -> Page[Role]: ...

    async def find_one(self, criteria: RoleCriteria) -> Role | None: ...

    async def get_by_id(self, role_id: UUID) -> Role | None: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> Role: ...

    async def soft_delete(self, role_id: UUID) -> Role: ...
