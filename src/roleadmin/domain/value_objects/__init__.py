"""Domain value objects."""

from roleadmin.domain.value_objects.criteria import PermissionCriteria, RoleCriteria
from roleadmin.domain.value_objects.paging import Page, Pageable

__all__ = [
    "Page",
    "Pageable",
    "PermissionCriteria",
    "RoleCriteria",
]
