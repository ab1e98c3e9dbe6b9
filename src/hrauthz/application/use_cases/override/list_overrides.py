"""List user overrides use case."""

from hrauthz.application.ports import PermissionDecider
from hrauthz.application.services.override_store import UserOverrideStore
from hrauthz.application.use_cases.guards import require_any
from hrauthz.application.use_cases.override.grant_override import OVERRIDE_ADMIN_PERMISSIONS
from hrauthz.domain.entities import UserOverride


class ListOverridesUseCase:
    """List a user's overrides. Users may list their own, admins anyone's."""

    def __init__(
        self,
        override_store: UserOverrideStore,
        permission_decider: PermissionDecider,
    ) -> None:
        self._overrides = override_store
        self._decider = permission_decider

    async def execute(
        self, actor_id: str, actor_role: str | None, user_id: str
    ) -> list[UserOverride]:
        if actor_id != user_id:
            await require_any(self._decider, actor_id, actor_role, OVERRIDE_ADMIN_PERMISSIONS)
        overrides = await self._overrides.get_overrides_for_user(user_id)
        return sorted(overrides, key=lambda o: o.granted_at, reverse=True)
