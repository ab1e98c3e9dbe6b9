"""Role permission repository port."""

from typing import Protocol

from hrauthz.domain.entities import RolePermission


class RolePermissionRepository(Protocol):
    """Port for role -> permission assignment persistence."""

    async def list_all(self) -> list[RolePermission]: ...

    async def add(self, role_permission: RolePermission) -> None: ...

    async def remove(self, role_permission: RolePermission) -> None: ...
