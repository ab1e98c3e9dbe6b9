"""Permission decision engine - the single answer to "may user U do A on S?"."""

from collections.abc import Iterable

import structlog

from hrauthz.application.services.decision_cache import DecisionCache
from hrauthz.application.services.override_store import UserOverrideStore
from hrauthz.application.services.permission_model import PermissionModel, PermissionModelRegistry
from hrauthz.domain.entities import Decision
from hrauthz.domain.value_objects import Action, DecisionReason, RoleName

logger = structlog.get_logger(__name__)


class PermissionDecisionEngine:
    """Combines role-derived permissions with user overrides.

    Order of evaluation:
    1. (resource, action) must be in the catalog, else INVALID_REQUEST.
    2. An active override wins: granted -> OVERRIDE_GRANTED, denied -> OVERRIDE_DENIED.
    3. Otherwise the role's effective permissions decide: ROLE_GRANTED or NO_GRANT.

    Unknown roles are denied with NO_GRANT. Store errors propagate to the caller
    and are never turned into an allow.
    """

    def __init__(
        self,
        registry: PermissionModelRegistry,
        override_store: UserOverrideStore,
        cache: DecisionCache | None = None,
    ) -> None:
        self._registry = registry
        self._overrides = override_store
        self._cache = cache

    async def decide(
        self,
        user_id: str,
        role: "RoleName | str | None",
        resource: str,
        action: "Action | str",
    ) -> Decision:
        model = self._registry.current
        role_value = str(role) if role is not None else None
        if not model.catalog.is_action_valid_for_resource(resource, action):
            logger.warning(
                "invalid_permission_request",
                user_id=user_id,
                role=role_value,
                resource=resource,
                action=str(action),
            )
            return Decision(
                allowed=False,
                reason=DecisionReason.INVALID_REQUEST,
                resource=resource,
                action=str(action),
                role=role_value,
            )

        checked = Action(action)

        async def compute() -> Decision:
            return await self._evaluate(model, user_id, role_value, resource, checked)

        if self._cache is None:
            return await compute()
        return await self._cache.get_or_compute(user_id, resource, checked, role_value, compute)

    async def decide_many(
        self,
        user_id: str,
        role: "RoleName | str | None",
        checks: Iterable[tuple[str, "Action | str"]],
    ) -> list[Decision]:
        """Evaluate every check independently, results in input order."""
        return [await self.decide(user_id, role, resource, action) for resource, action in checks]

    async def capability_matrix(
        self, user_id: str, role: "RoleName | str | None"
    ) -> dict[str, dict[str, bool]]:
        """resource -> action -> allowed, over the whole catalog."""
        permissions = self._registry.current.catalog.list_permissions()
        decisions = await self.decide_many(
            user_id, role, [(p.resource, p.action) for p in permissions]
        )
        matrix: dict[str, dict[str, bool]] = {}
        for decision in decisions:
            matrix.setdefault(decision.resource, {})[decision.action] = decision.allowed
        return matrix

    async def _evaluate(
        self,
        model: PermissionModel,
        user_id: str,
        role: str | None,
        resource: str,
        action: Action,
    ) -> Decision:
        override = await self._overrides.get_active_override(user_id, resource, action)
        if override is not None:
            return Decision(
                allowed=override.granted,
                reason=(
                    DecisionReason.OVERRIDE_GRANTED
                    if override.granted
                    else DecisionReason.OVERRIDE_DENIED
                ),
                resource=resource,
                action=action.value,
                role=role,
                override_id=override.id,
                valid_until=override.expires_at,
            )

        if RoleName.parse(role) is None:
            logger.info("unknown_role", user_id=user_id, role=role)
        elif model.resolver.has_effective_permission(role, resource, action):
            return Decision(
                allowed=True,
                reason=DecisionReason.ROLE_GRANTED,
                resource=resource,
                action=action.value,
                role=role,
            )
        return Decision(
            allowed=False,
            reason=DecisionReason.NO_GRANT,
            resource=resource,
            action=action.value,
            role=role,
        )
