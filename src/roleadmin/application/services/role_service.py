"""Role service - role reads, writes and CSV export."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog

from roleadmin.application.dto.role_csv import RoleCsv
from roleadmin.application.ports import CsvWriter, UnitOfWork, UnitOfWorkFactory
from roleadmin.domain.entities import Permission, Role
from roleadmin.domain.exceptions import InvalidArgument, NotFound
from roleadmin.domain.value_objects import Page, Pageable, PermissionCriteria, RoleCriteria

logger = structlog.get_logger(__name__)

CSV_FETCH_SIZE = 100


class RoleService:
    """Orchestrates role repository calls inside units of work.

    Single-role reads attach the full permission catalog to
    ``Role.permissions`` so callers can render every permission next to
    the role's enabled flags. The catalog is never persisted with the role.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        csv_writer: CsvWriter,
        csv_fetch_size: int = CSV_FETCH_SIZE,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._csv_writer = csv_writer
        self._csv_fetch_size = csv_fetch_size

    async def find_all(self, criteria: RoleCriteria, pageable: Pageable) -> Page[Role]:
        """Find a page of live roles matching criteria."""
        if criteria is None:
            raise InvalidArgument("criteria must not be null")
        async with self._uow_factory(read_only=True) as uow:
            return await uow.roles.find_all(criteria, pageable)

    async def find_one(self, criteria: RoleCriteria) -> Role | None:
        """Find at most one live role, enriched with the catalog."""
        if criteria is None:
            raise InvalidArgument("criteria must not be null")
        async with self._uow_factory(read_only=True) as uow:
            role = await uow.roles.find_one(criteria)
            if role:
                role.permissions.extend(await self._get_permissions(uow))
            return role

    async def find_by_id(self, role_id: UUID) -> Role:
        """Get live role by id, enriched with the catalog.

        Raises:
            InvalidArgument: role_id is None.
            NotFound: no live role has this id.
        """
        if role_id is None:
            raise InvalidArgument("id must not be null")
        async with self._uow_factory(read_only=True) as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise NotFound("Role", role_id)
            role.permissions.extend(await self._get_permissions(uow))
            return role

    async def create(self, input_role: Role) -> Role:
        """Persist a new role with its permission associations."""
        if input_role is None:
            raise InvalidArgument("inputRole must not be null")
        now = datetime.now(UTC)
        input_role.id = input_role.id or uuid4()
        input_role.created_at = now
        input_role.updated_at = now
        input_role.version = 1
        for rp in input_role.role_permissions:
            rp.role_code = input_role.role_code

        async with self._uow_factory() as uow:
            created = await uow.roles.create(input_role)

        logger.info(
            "role_created",
            role_id=str(created.id),
            role_code=created.role_code,
            enabled=created.enabled_permission_codes,
        )
        return created

    async def update(self, input_role: Role) -> Role:
        """Persist role attributes and permission flags.

        Raises:
            NotFound: role does not exist or was deleted.
            OptimisticLockFailure: role version is stale.
        """
        if input_role is None:
            raise InvalidArgument("inputRole must not be null")
        input_role.updated_at = datetime.now(UTC)

        async with self._uow_factory() as uow:
            updated = await uow.roles.update(input_role)

        logger.info("role_updated", role_id=str(updated.id), version=updated.version)
        return updated

    async def delete(self, role_id: UUID) -> Role:
        """Soft-delete role (the row is kept with deleted_at set)."""
        if role_id is None:
            raise InvalidArgument("id must not be null")
        async with self._uow_factory() as uow:
            deleted = await uow.roles.soft_delete(role_id)

        logger.info("role_deleted", role_id=str(role_id))
        return deleted

    def write_csv(self, criteria: RoleCriteria) -> AsyncIterator[bytes]:
        """CSV chunks for every live role matching criteria, header first."""
        if criteria is None:
            raise InvalidArgument("criteria must not be null")
        return self._iter_csv(criteria)

    async def _iter_csv(self, criteria: RoleCriteria) -> AsyncIterator[bytes]:
        # The unit of work is closed before the first chunk is yielded.
        chunks = [self._csv_writer.encode([RoleCsv.HEADER])]
        exported = 0
        async with self._uow_factory(read_only=True) as uow:
            page_number = 1
            while True:
                page = await uow.roles.find_all(
                    criteria, Pageable(page=page_number, size=self._csv_fetch_size)
                )
                if page.items:
                    exported += len(page.items)
                    chunks.append(
                        self._csv_writer.encode(RoleCsv.from_role(r).as_row() for r in page.items)
                    )
                if not page.has_next:
                    break
                page_number += 1
        logger.info("roles_exported", count=exported)
        for chunk in chunks:
            yield chunk

    async def _get_permissions(self, uow: UnitOfWork) -> list[Permission]:
        page = await uow.permissions.find_all(PermissionCriteria(), Pageable.unpaged())
        return page.items
