"""Assign role permission use case."""

import structlog

from hrauthz.application.ports import PermissionDecider, UnitOfWork, UnitOfWorkFactory
from hrauthz.application.services.permission_model import PermissionModelRegistry
from hrauthz.application.use_cases.guards import require_any
from hrauthz.domain.entities import RolePermission
from hrauthz.domain.exceptions import InvalidRequest, NotFound
from hrauthz.domain.value_objects import Action, RoleName

logger = structlog.get_logger(__name__)

ROLE_ADMIN_PERMISSIONS = [("settings", Action.ADMIN)]


def parse_role(value: str) -> RoleName:
    role = RoleName.parse(value)
    if role is None:
        raise NotFound("Role", value)
    return role


async def persist_current_grants_if_empty(
    uow: UnitOfWork, registry: PermissionModelRegistry
) -> None:
    """Write the in-memory grants to an empty store so the first change keeps them."""
    if await uow.role_permissions.list_all():
        return
    for role in registry.current.hierarchy.roles():
        for granted in role.permissions:
            await uow.role_permissions.add(
                RolePermission(role=role.name, resource=granted.resource, action=granted.action)
            )


class AssignRolePermissionUseCase:
    """Grant a permission directly to a role and reload the permission model."""

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
    ) -> RolePermission:
        """Store role -> (resource, action). Actor must have settings:admin."""
        await require_any(self._decider, actor_id, actor_role, ROLE_ADMIN_PERMISSIONS)
        role_name = parse_role(role)
        permission = self._registry.current.catalog.permission(resource, action)
        if permission.deprecated:
            raise InvalidRequest(f"Permission '{permission.id}' is deprecated")

        role_permission = RolePermission(
            role=role_name, resource=resource, action=permission.action
        )
        async with self._uow_factory() as uow:
            await persist_current_grants_if_empty(uow, self._registry)
            await uow.role_permissions.add(role_permission)

        await self._registry.reload(self._uow_factory)
        logger.info(
            "role_permission_assigned",
            actor_id=actor_id,
            role=role_name.value,
            permission=permission.id,
        )
        return role_permission
