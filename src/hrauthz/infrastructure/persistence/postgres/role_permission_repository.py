"""PostgreSQL role permission repository implementation."""

from psycopg import AsyncConnection

from hrauthz.domain.entities import RolePermission
from hrauthz.domain.value_objects import Action, RoleName


class PostgresRolePermissionRepository:
    """Role permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_all(self) -> list[RolePermission]:
        """List every direct role grant."""
        cur = await self._conn.execute(
            "SELECT role, resource, action FROM role_permission ORDER BY role, resource, action"
        )
        rows = await cur.fetchall()
        return [RolePermission(role=RoleName(r[0]), resource=r[1], action=Action(r[2])) for r in rows]

    async def add(self, role_permission: RolePermission) -> None:
        """Add grant. Existing grants are left untouched."""
        await self._conn.execute(
            "INSERT INTO role_permission (role, resource, action) VALUES (%s, %s, %s) "
            "ON CONFLICT DO NOTHING",
            (
                role_permission.role.value,
                role_permission.resource,
                role_permission.action.value,
            ),
        )

    async def remove(self, role_permission: RolePermission) -> None:
        """Remove grant if present."""
        await self._conn.execute(
            "DELETE FROM role_permission WHERE role = %s AND resource = %s AND action = %s",
            (
                role_permission.role.value,
                role_permission.resource,
                role_permission.action.value,
            ),
        )
