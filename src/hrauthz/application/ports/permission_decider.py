"""Permission decider port - RBAC authorization."""

from typing import Protocol

from hrauthz.domain.entities import Decision


class PermissionDecider(Protocol):
    """Port for deciding whether a user may perform an action on a resource."""

    async def decide(
        self, user_id: str, role: str | None, resource: str, action: str
    ) -> Decision: ...
