"""Unit of Work port - transactional boundary over the permission store."""

from collections.abc import AsyncIterator
from typing import Protocol

from hrauthz.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from hrauthz.application.ports.repositories.role_permission_repository import (
    RolePermissionRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def overrides(self) -> OverrideRepository: ...

    @property
    def role_permissions(self) -> RolePermissionRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
