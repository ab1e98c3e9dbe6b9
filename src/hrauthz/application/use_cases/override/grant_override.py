"""Grant override use case."""

from datetime import datetime

from hrauthz.application.ports import PermissionDecider
from hrauthz.application.services.override_store import UserOverrideStore
from hrauthz.application.use_cases.guards import require_any
from hrauthz.domain.entities import UserOverride
from hrauthz.domain.value_objects import Action

OVERRIDE_ADMIN_PERMISSIONS = [("settings", Action.ADMIN), ("users", Action.ADMIN)]


class GrantOverrideUseCase:
    """Create a per-user grant or denial. Actor must have settings:admin or users:admin."""

    def __init__(
        self,
        override_store: UserOverrideStore,
        permission_decider: PermissionDecider,
    ) -> None:
        self._overrides = override_store
        self._decider = permission_decider

    async def execute(
        self,
        actor_id: str,
        actor_role: str | None,
        user_id: str,
        resource: str,
        action: str,
        granted: bool,
        expires_at: datetime | None = None,
    ) -> UserOverride:
        await require_any(self._decider, actor_id, actor_role, OVERRIDE_ADMIN_PERMISSIONS)
        return await self._overrides.add_override(
            user_id=user_id,
            resource=resource,
            action=action,
            granted=granted,
            granted_by=actor_id,
            expires_at=expires_at,
        )
