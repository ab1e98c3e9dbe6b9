"""PostgreSQL user override repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from hrauthz.domain.entities import UserOverride
from hrauthz.domain.value_objects import Action

_COLUMNS = "id, user_id, resource, action, granted, granted_by, granted_at, expires_at"


def _row_to_override(r: tuple) -> UserOverride:
    return UserOverride(
        id=r[0],
        user_id=r[1],
        resource=r[2],
        action=Action(r[3]),
        granted=r[4],
        granted_by=r[5],
        granted_at=r[6],
        expires_at=r[7],
    )


class PostgresOverrideRepository:
    """User override repository implementation over the user_permission table."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, override_id: UUID) -> UserOverride | None:
        """Get override by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission WHERE id = %s",
            (override_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_override(r)

    async def list_by_user(self, user_id: str) -> list[UserOverride]:
        """List all overrides for user, expired included."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission WHERE user_id = %s ORDER BY granted_at",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [_row_to_override(r) for r in rows]

    async def list_for_key(self, user_id: str, resource: str, action: str) -> list[UserOverride]:
        """List overrides for user on (resource, action)."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM user_permission "
            "WHERE user_id = %s AND resource = %s AND action = %s",
            (user_id, resource, str(action)),
        )
        rows = await cur.fetchall()
        return [_row_to_override(r) for r in rows]

    async def create(self, override: UserOverride) -> UserOverride:
        """Create override."""
        await self._conn.execute(
            f"INSERT INTO user_permission ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
            (
                override.id,
                override.user_id,
                override.resource,
                override.action.value,
                override.granted,
                override.granted_by,
                override.granted_at,
                override.expires_at,
            ),
        )
        return override

    async def delete(self, override_id: UUID) -> None:
        """Delete override."""
        await self._conn.execute(
            "DELETE FROM user_permission WHERE id = %s",
            (override_id,),
        )

    async def delete_expired(self, before: datetime) -> int:
        """Delete overrides that expired before the given instant."""
        cur = await self._conn.execute(
            "DELETE FROM user_permission WHERE expires_at IS NOT NULL AND expires_at <= %s",
            (before,),
        )
        return cur.rowcount
