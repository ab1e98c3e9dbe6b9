"""Purge expired overrides use case."""

from hrauthz.application.services.override_store import UserOverrideStore


class PurgeExpiredOverridesUseCase:
    """Storage hygiene job. Expired overrides are already ignored by decisions."""

    def __init__(self, override_store: UserOverrideStore) -> None:
        self._overrides = override_store

    async def execute(self) -> int:
        return await self._overrides.purge_expired()
