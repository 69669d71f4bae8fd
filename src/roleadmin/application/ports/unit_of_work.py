"""Unit of Work port - transactional boundary."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from roleadmin.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from roleadmin.application.ports.repositories.role_repository import RoleRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def permissions(self) -> PermissionRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for UnitOfWork contexts.

    Commits when the block exits normally and rolls back on any exception.
    ``read_only`` opens a read-only transaction.
    """

    def __call__(
        self, *, read_only: bool = False
    ) -> AbstractAsyncContextManager[UnitOfWork]: ...
