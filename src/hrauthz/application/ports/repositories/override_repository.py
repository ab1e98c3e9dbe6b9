"""User override repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from hrauthz.domain.entities import UserOverride


class OverrideRepository(Protocol):
    """Port for per-user permission override persistence."""

    async def get_by_id(self, override_id: UUID) -> UserOverride | None: ...

    async def list_by_user(self, user_id: str) -> list[UserOverride]: ...

    async def list_for_key(self, user_id: str, resource: str, action: str) -> list[UserOverride]: ...

    async def create(self, override: UserOverride) -> UserOverride: ...

    async def delete(self, override_id: UUID) -> None: ...

    async def delete_expired(self, before: datetime) -> int: ...
