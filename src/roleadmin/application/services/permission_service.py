"""Permission catalog service."""

from roleadmin.application.ports import UnitOfWorkFactory
from roleadmin.domain.entities import Permission
from roleadmin.domain.exceptions import InvalidArgument
from roleadmin.domain.value_objects import Page, Pageable, PermissionCriteria


class PermissionService:
    """Read-only access to the permission catalog."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    async def find_all(
        self, criteria: PermissionCriteria, pageable: Pageable
    ) -> Page[Permission]:
        """Find catalog entries matching criteria."""
        if criteria is None:
            raise InvalidArgument("criteria must not be null")
        async with self._uow_factory(read_only=True) as uow:
            return await uow.permissions.find_all(criteria, pageable)

    async def list_all(self) -> list[Permission]:
        """Whole catalog, ordered by code."""
        page = await self.find_all(PermissionCriteria(), Pageable.unpaged())
        return page.items
