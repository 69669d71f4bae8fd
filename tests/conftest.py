"""Pytest fixtures for role administration tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from copy import deepcopy
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from roleadmin.domain.entities import Permission, Role, RolePermission
from roleadmin.domain.exceptions import DuplicateRole, NotFound, OptimisticLockFailure
from roleadmin.domain.value_objects import Page, Pageable, PermissionCriteria, RoleCriteria

CATALOG = [
    ("permission:read", "View the permission catalog"),
    ("role:read", "View roles"),
    ("role:save", "Create, edit and delete roles"),
    ("user:read", "View users"),
    ("user:save", "Create, edit and delete users"),
]


def _page(items: list, pageable: Pageable) -> Page:
    total = len(items)
    if pageable.is_paged:
        items = items[pageable.offset : pageable.offset + pageable.size]
    return Page(items=items, total=total, page=pageable.page, size=pageable.size)


# --- Fake repositories ---


class FakeRoleRepository:
    """In-memory role repository. Stores copies so only create/update persist changes."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Role] = {}

    def add_role(self, role: Role) -> Role:
        """Seed a role directly (bypasses service defaults)."""
        role.id = role.id or uuid4()
        role.created_at = role.created_at or datetime.now(UTC)
        role.updated_at = role.updated_at or role.created_at
        role.version = role.version or 1
        self._by_id[role.id] = deepcopy(role)
        return role

    def stored(self, role_id: UUID) -> Role | None:
        """Raw stored row, including soft-deleted roles."""
        return self._by_id.get(role_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def live(self) -> list[Role]:
        """Stored roles that are not soft-deleted, ordered by code."""
        return sorted(
            (r for r in self._by_id.values() if r.deleted_at is None),
            key=lambda r: r.role_code,
        )

    def _matches(self, role: Role, criteria: RoleCriteria) -> bool:
        if role.deleted_at is not None:
            return False
        if criteria.id and role.id != criteria.id:
            return False
        if criteria.role_code and role.role_code != criteria.role_code:
            return False
        if criteria.role_name and criteria.role_name.lower() not in role.role_name.lower():
            return False
        return True

    def _load(self, role: Role) -> Role:
        loaded = deepcopy(role)
        loaded.permissions = []
        return loaded

    async def find_all(self, criteria: RoleCriteria, pageable: Pageable) -> Page[Role]:
        items = sorted(
            (self._load(r) for r in self._by_id.values() if self._matches(r, criteria)),
            key=lambda r: r.role_code,
        )
        return _page(items, pageable)

    async def find_one(self, criteria: RoleCriteria) -> Role | None:
        page = await self.find_all(criteria, Pageable(size=1))
        return page.items[0] if page.items else None

    async def get_by_id(self, role_id: UUID) -> Role | None:
        return await self.find_one(RoleCriteria(id=role_id))

    async def create(self, role: Role) -> Role:
        if await self.find_one(RoleCriteria(role_code=role.role_code)):
            raise DuplicateRole(f"Role code '{role.role_code}' is already in use")
        stored = deepcopy(role)
        stored.permissions = []
        self._by_id[role.id] = stored
        return role

    async def update(self, role: Role) -> Role:
        stored = self._by_id.get(role.id)
        if stored is None or stored.deleted_at is not None:
            raise NotFound("Role", role.id)
        if stored.version != role.version:
            raise OptimisticLockFailure(f"Role {role.id} was modified concurrently")
        stored.role_name = role.role_name
        stored.updated_at = role.updated_at
        stored.version += 1
        for rp in role.role_permissions:
            stored.set_permission(rp.permission_code, rp.is_enabled)
        role.version = stored.version
        return role

    async def soft_delete(self, role_id: UUID) -> Role:
        stored = self._by_id.get(role_id)
        if stored is None or stored.deleted_at is not None:
            raise NotFound("Role", role_id)
        stored.deleted_at = datetime.now(UTC)
        stored.version += 1
        return self._load(stored)


class FakePermissionRepository:
    """In-memory permission catalog."""

    def __init__(self, catalog: list[tuple[str, str]] | None = None) -> None:
        self._items = [
            Permission(id=uuid4(), permission_code=code, description=description)
            for code, description in (CATALOG if catalog is None else catalog)
        ]

    async def find_all(
        self, criteria: PermissionCriteria, pageable: Pageable
    ) -> Page[Permission]:
        items = sorted(self._items, key=lambda p: p.permission_code)
        if criteria.permission_code:
            items = [p for p in items if p.permission_code == criteria.permission_code]
        if criteria.description:
            items = [p for p in items if criteria.description.lower() in p.description.lower()]
        return _page(items, pageable)


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.roles = FakeRoleRepository()
        self.permissions = FakePermissionRepository()
        self.read_only_calls = 0
        self.open_units = 0

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory that yields the same FakeUnitOfWork for every call."""

    @asynccontextmanager
    async def _factory(*, read_only: bool = False) -> AsyncIterator[FakeUnitOfWork]:
        if read_only:
            uow.read_only_calls += 1
        uow.open_units += 1
        try:
            yield uow
        finally:
            uow.open_units -= 1

    return _factory


def make_role(
    role_code: str = "ADMIN",
    role_name: str = "Administrator",
    enabled: dict[str, bool] | None = None,
) -> Role:
    """Role with one association per entry of enabled."""
    return Role(
        role_code=role_code,
        role_name=role_name,
        role_permissions=[
            RolePermission(role_code=role_code, permission_code=code, is_enabled=flag)
            for code, flag in (enabled or {}).items()
        ],
    )


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager with the test's FakeUnitOfWork."""
    return make_uow_factory(fake_uow)
