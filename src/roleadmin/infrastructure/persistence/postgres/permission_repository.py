"""PostgreSQL permission repository implementation."""

from psycopg import AsyncConnection

from roleadmin.domain.entities import Permission
from roleadmin.domain.value_objects import Page, Pageable, PermissionCriteria
from roleadmin.infrastructure.persistence.postgres.connection import like_pattern


class PostgresPermissionRepository:
    """Permission catalog repository implementation (read-only)."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def find_all(
        self, criteria: PermissionCriteria, pageable: Pageable
    ) -> Page[Permission]:
        """Find permissions matching criteria, ordered by code."""
        conditions = []
        _params: list[object] = []
        if criteria.permission_code:
            conditions.append("permission_code = %s")
            _params.append(criteria.permission_code)
        if criteria.description:
            conditions.append("description ILIKE %s")
            _params.append(like_pattern(criteria.description))
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""

        cur = await self._conn.execute(f"SELECT count(*) FROM permission{where}", tuple(_params))
        total = (await cur.fetchone())[0]

        q = f"SELECT id, permission_code, description FROM permission{where} ORDER BY permission_code"
        if pageable.is_paged:
            q += " LIMIT %s OFFSET %s"
            _params.extend([pageable.size, pageable.offset])
        cur = await self._conn.execute(q, tuple(_params))
        rows = await cur.fetchall()
        return Page(
            items=[Permission(id=r[0], permission_code=r[1], description=r[2]) for r in rows],
            total=total,
            page=pageable.page,
            size=pageable.size,
        )
