"""Permission repository port."""

from typing import Protocol

from roleadmin.domain.entities import Permission
from roleadmin.domain.value_objects import Page, Pageable, PermissionCriteria


class PermissionRepository(Protocol):
    """Port for the read-only permission catalog."""

    async def find_all(
        self, criteria: PermissionCriteria, pageable: Pageable
    ) -> Page[Permission]: ...
