"""Remove role permission use case."""

import structlog

from hrauthz.application.ports import PermissionDecider, UnitOfWorkFactory
from hrauthz.application.services.permission_model import PermissionModelRegistry
from hrauthz.application.use_cases.guards import require_any
from hrauthz.application.use_cases.role_permission.assign_role_permission import (
    ROLE_ADMIN_PERMISSIONS,
    parse_role,
    persist_current_grants_if_empty,
)
from hrauthz.domain.entities import RolePermission

logger = structlog.get_logger(__name__)


class RemoveRolePermissionUseCase:
    """Revoke a direct role grant and reload the permission model. Idempotent."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        registry: PermissionModelRegistry,
        permission_decider: PermissionDecider,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._registry = registry
        self._decider = permission_decider

    async def execute(
        self,
        actor_id: str,
        actor_role: str | None,
        role: str,
        resource: str,
        action: str,
    ) -> None:
        await require_any(self._decider, actor_id, actor_role, ROLE_ADMIN_PERMISSIONS)
        role_name = parse_role(role)
        permission = self._registry.current.catalog.permission(resource, action)

        async with self._uow_factory() as uow:
            await persist_current_grants_if_empty(uow, self._registry)
            await uow.role_permissions.remove(
                RolePermission(role=role_name, resource=resource, action=permission.action)
            )

        await self._registry.reload(self._uow_factory)
        logger.info(
            "role_permission_removed",
            actor_id=actor_id,
            role=role_name.value,
            permission=permission.id,
        )
