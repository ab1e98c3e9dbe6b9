"""Revoke override use case."""

from uuid import UUID

from hrauthz.application.ports import PermissionDecider
from hrauthz.application.services.override_store import UserOverrideStore
from hrauthz.application.use_cases.guards import require_any
from hrauthz.application.use_cases.override.grant_override import OVERRIDE_ADMIN_PERMISSIONS


class RevokeOverrideUseCase:
    """Remove an override by id. Idempotent: a missing override is not an error."""

    def __init__(
        self,
        override_store: UserOverrideStore,
        permission_decider: PermissionDecider,
    ) -> None:
        self._overrides = override_store
        self._decider = permission_decider

    async def execute(self, actor_id: str, actor_role: str | None, override_id: UUID) -> None:
        await require_any(self._decider, actor_id, actor_role, OVERRIDE_ADMIN_PERMISSIONS)
        await self._overrides.remove_override(override_id)
