"""PostgreSQL role repository implementation."""

from datetime import UTC, datetime
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from roleadmin.domain.entities import Role, RolePermission
from roleadmin.domain.exceptions import DuplicateRole, NotFound, OptimisticLockFailure
from roleadmin.domain.value_objects import Page, Pageable, RoleCriteria
from roleadmin.infrastructure.persistence.postgres.connection import like_pattern

_ROLE_COLUMNS = "id, role_code, role_name, created_at, updated_at, deleted_at, version"


def _to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        role_code=r[1],
        role_name=r[2],
        created_at=r[3],
        updated_at=r[4],
        deleted_at=r[5],
        version=r[6],
    )


def _where(criteria: RoleCriteria) -> tuple[str, list[object]]:
    conditions = ["deleted_at IS NULL"]
    params: list[object] = []
    if criteria.id:
        conditions.append("id = %s")
        params.append(criteria.id)
    if criteria.role_code:
        conditions.append("role_code = %s")
        params.append(criteria.role_code)
    if criteria.role_name:
        conditions.append("role_name ILIKE %s")
        params.append(like_pattern(criteria.role_name))
    return " WHERE " + " AND ".join(conditions), params


class PostgresRoleRepository:
    """Role repository implementation. Role permissions live in role_permission."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def find_all(self, criteria: RoleCriteria, pageable: Pageable) -> Page[Role]:
        """Find live roles matching criteria, ordered by role code."""
        where, params = _where(criteria)
        cur = await self._conn.execute(f"SELECT count(*) FROM role{where}", tuple(params))
        total = (await cur.fetchone())[0]

        q = f"SELECT {_ROLE_COLUMNS} FROM role{where} ORDER BY role_code"
        if pageable.is_paged:
            q += " LIMIT %s OFFSET %s"
            params.extend([pageable.size, pageable.offset])
        cur = await self._conn.execute(q, tuple(params))
        roles = [_to_role(r) for r in await cur.fetchall()]
        await self._load_role_permissions(roles)
        return Page(items=roles, total=total, page=pageable.page, size=pageable.size)

    async def find_one(self, criteria: RoleCriteria) -> Role | None:
        """Find first live role matching criteria."""
        where, params = _where(criteria)
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM role{where} ORDER BY role_code LIMIT 1",
            tuple(params),
        )
        r = await cur.fetchone()
        if not r:
            return None
        role = _to_role(r)
        await self._load_role_permissions([role])
        return role

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get live role by id."""
        return await self.find_one(RoleCriteria(id=role_id))

    async def create(self, role: Role) -> Role:
        """Insert role and its permission associations."""
        try:
            await self._conn.execute(
                f"INSERT INTO role ({_ROLE_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s)",
                (
                    role.id,
                    role.role_code,
                    role.role_name,
                    role.created_at,
                    role.updated_at,
                    role.deleted_at,
                    role.version,
                ),
            )
        except UniqueViolation as e:
            raise DuplicateRole(f"Role code '{role.role_code}' is already in use") from e
        await self._save_role_permissions(role)
        return role

    async def update(self, role: Role) -> Role:
        """Update role attributes and upsert permission flags (version checked)."""
        cur = await self._conn.execute(
            "UPDATE role SET role_name=%s, updated_at=%s, version=version + 1 "
            "WHERE id=%s AND version=%s AND deleted_at IS NULL RETURNING version",
            (role.role_name, role.updated_at, role.id, role.version),
        )
        r = await cur.fetchone()
        if not r:
            if await self.get_by_id(role.id) is None:
                raise NotFound("Role", role.id)
            raise OptimisticLockFailure(f"Role {role.id} was modified concurrently")
        role.version = r[0]
        await self._save_role_permissions(role)
        return role

    async def soft_delete(self, role_id: UUID) -> Role:
        """Mark role deleted; the row and its associations are kept."""
        now = datetime.now(UTC)
        cur = await self._conn.execute(
            "UPDATE role SET deleted_at=%s, updated_at=%s, version=version + 1 "
            f"WHERE id=%s AND deleted_at IS NULL RETURNING {_ROLE_COLUMNS}",
            (now, now, role_id),
        )
        r = await cur.fetchone()
        if not r:
            raise NotFound("Role", role_id)
        return _to_role(r)

    async def _load_role_permissions(self, roles: list[Role]) -> None:
        if not roles:
            return
        by_id = {role.id: role for role in roles}
        cur = await self._conn.execute(
            "SELECT role_id, role_code, permission_code, is_enabled FROM role_permission "
            "WHERE role_id = ANY(%s) ORDER BY permission_code",
            (list(by_id),),
        )
        for r in await cur.fetchall():
            by_id[r[0]].role_permissions.append(
                RolePermission(role_code=r[1], permission_code=r[2], is_enabled=r[3])
            )

    async def _save_role_permissions(self, role: Role) -> None:
        if not role.role_permissions:
            return
        async with self._conn.cursor() as cur:
            await cur.executemany(
                "INSERT INTO role_permission (role_id, role_code, permission_code, is_enabled) "
                "VALUES (%s, %s, %s, %s) "
                "ON CONFLICT (role_id, permission_code) DO UPDATE SET is_enabled = EXCLUDED.is_enabled",
                [
                    (role.id, role.role_code, rp.permission_code, rp.is_enabled)
                    for rp in role.role_permissions
                ],
            )
