"""Catalog and role permission API resources."""

import falcon.asgi

from hrauthz.application.services.permission_model import PermissionModelRegistry
from hrauthz.application.use_cases.role_permission.assign_role_permission import (
    AssignRolePermissionUseCase,
)
from hrauthz.application.use_cases.role_permission.remove_role_permission import (
    RemoveRolePermissionUseCase,
)
from hrauthz.domain.entities import Permission, Resource
from hrauthz.domain.exceptions import InvalidRequest, NotFound, PermissionDenied
from hrauthz.domain.value_objects import Action, RoleName

SETTINGS_VIEW = ("settings", Action.VIEW)


def _resource_media(resource: Resource) -> dict:
    return {
        "name": resource.name,
        "label": resource.label,
        "description": resource.description,
        "actions": sorted(a.value for a in resource.actions),
        "deprecated_actions": sorted(a.value for a in resource.deprecated_actions),
    }


def _permissions_media(permissions: frozenset[Permission]) -> list[dict]:
    return [
        {"id": p.id, "resource": p.resource, "action": p.action.value}
        for p in sorted(permissions, key=lambda p: (p.resource, p.action))
    ]


class ResourcesResource:
    """GET /v1/resources - list catalog resources."""

    permission_map = {"GET": SETTINGS_VIEW}

    def __init__(self, registry: PermissionModelRegistry) -> None:
        self._registry = registry

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        catalog = self._registry.current.catalog
        resp.media = {"items": [_resource_media(r) for r in catalog.list_resources()]}
        resp.status = falcon.HTTP_200


class ResourceResource:
    """GET /v1/resources/{name} - one catalog resource with its permissions."""

    permission_map = {"GET": SETTINGS_VIEW}

    def __init__(self, registry: PermissionModelRegistry) -> None:
        self._registry = registry

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, name: str
    ) -> None:
        catalog = self._registry.current.catalog
        try:
            resource = catalog.get_resource(name)
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": f"Resource '{name}' not found"}
            return
        media = _resource_media(resource)
        media["permissions"] = [
            {
                "id": p.id,
                "action": p.action.value,
                "description": p.description,
                "deprecated": p.deprecated,
            }
            for p in catalog.list_permissions()
            if p.resource == name
        ]
        resp.media = media
        resp.status = falcon.HTTP_200


class RolePermissionsResource:
    """GET/POST /v1/roles/{role}/permissions - describe and extend a role."""

    permission_map = {"GET": SETTINGS_VIEW}

    def __init__(
        self,
        registry: PermissionModelRegistry,
        assign_role_permission: AssignRolePermissionUseCase,
    ) -> None:
        self._registry = registry
        self._assign = assign_role_permission

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role: str
    ) -> None:
        """Direct, inherited and effective permissions of role."""
        role_name = RoleName.parse(role)
        if role_name is None:
            resp.status = falcon.HTTP_404
            resp.media = {"error": f"Role '{role}' not found"}
            return

        view = self._registry.current.resolver.describe(role_name)
        resp.media = {
            "role": view.role.value,
            "inherits_from": [a.value for a in view.ancestors],
            "direct": _permissions_media(view.direct),
            "inherited": _permissions_media(view.inherited),
            "effective": _permissions_media(view.effective),
        }
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role: str
    ) -> None:
        """Grant {resource, action} directly to role."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            body = await req.get_media()
            resource = body["resource"]
            action = body["action"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        try:
            granted = await self._assign.execute(user.user_id, user.role, role, resource, action)
        except PermissionDenied:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": f"Role '{role}' not found"}
            return
        except InvalidRequest as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        resp.media = {
            "role": granted.role.value,
            "resource": granted.resource,
            "action": granted.action.value,
        }
        resp.status = falcon.HTTP_201


class RolePermissionResource:
    """DELETE /v1/roles/{role}/permissions/{resource}/{action} - revoke a direct grant."""

    def __init__(self, remove_role_permission: RemoveRolePermissionUseCase) -> None:
        self._remove = remove_role_permission

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role: str,
        resource: str,
        action: str,
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            await self._remove.execute(user.user_id, user.role, role, resource, action)
            resp.status = falcon.HTTP_204
        except PermissionDenied:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
        except NotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": f"Role '{role}' not found"}
        except InvalidRequest as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
