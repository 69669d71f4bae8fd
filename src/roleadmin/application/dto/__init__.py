"""Application DTOs."""

from roleadmin.application.dto.role_csv import RoleCsv
from roleadmin.application.dto.role_form import RoleForm, SearchRoleForm

__all__ = [
    "RoleCsv",
    "RoleForm",
    "SearchRoleForm",
]
