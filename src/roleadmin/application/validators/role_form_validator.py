"""Role form validator - checks that need the catalog or existing roles."""

from roleadmin.application.dto.role_form import RoleForm
from roleadmin.application.ports import UnitOfWorkFactory
from roleadmin.domain.value_objects import Pageable, PermissionCriteria, RoleCriteria


class RoleFormValidator:
    """Validate a bound RoleForm against stored data."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory

    async def validate(self, form: RoleForm) -> dict[str, list[str]]:
        """Return field name -> messages; empty when the form is valid."""
        errors: dict[str, list[str]] = {}
        async with self._uow_factory(read_only=True) as uow:
            catalog = await uow.permissions.find_all(
                PermissionCriteria(), Pageable.unpaged()
            )
            known = {p.permission_code for p in catalog.items}
            unknown = sorted(set(form.permissions) - known)
            if unknown:
                errors["permissions"] = [f"Unknown permission: {', '.join(unknown)}"]

            if form.is_new:
                existing = await uow.roles.find_one(RoleCriteria(role_code=form.role_code))
                if existing:
                    errors["role_code"] = [f"Role code '{form.role_code}' is already in use"]
        return errors
