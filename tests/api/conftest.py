"""Fixtures for API tests."""

import falcon.asgi
import pytest

from hrauthz.application.use_cases.override.grant_override import GrantOverrideUseCase
from hrauthz.application.use_cases.override.list_overrides import ListOverridesUseCase
from hrauthz.application.use_cases.override.revoke_override import RevokeOverrideUseCase
from hrauthz.application.use_cases.role_permission.assign_role_permission import (
    AssignRolePermissionUseCase,
)
from hrauthz.application.use_cases.role_permission.remove_role_permission import (
    RemoveRolePermissionUseCase,
)
from hrauthz.interfaces.api.middleware.auth import RequestUser
from hrauthz.interfaces.api.middleware.authorization import AuthorizationMiddleware


class AuthBypassMiddleware:
    """Middleware that sets context.user from an X-Test-User: <user_id>:<role> header.

    Defaults to an admin. A value of "-" leaves the request unauthenticated.
    """

    async def process_request(self, req, resp):
        raw = req.get_header("X-Test-User", default="admin-1:admin")
        if raw == "-":
            req.context.user = None
            return
        user_id, _, role = raw.partition(":")
        req.context.user = RequestUser(user_id=user_id, role=role or None)


@pytest.fixture
def app(uow_factory, registry, override_store, engine):
    """Falcon ASGI app with API resources for testing."""
    from hrauthz.interfaces.api.resources.catalog import (
        ResourceResource,
        ResourcesResource,
        RolePermissionResource,
        RolePermissionsResource,
    )
    from hrauthz.interfaces.api.resources.decisions import (
        MyPermissionsResource,
        PermissionCheckManyResource,
        PermissionCheckResource,
    )
    from hrauthz.interfaces.api.resources.health import HealthResource
    from hrauthz.interfaces.api.resources.overrides import (
        OverrideResource,
        UserOverridesResource,
    )

    grant_override = GrantOverrideUseCase(override_store, engine)
    revoke_override = RevokeOverrideUseCase(override_store, engine)
    list_overrides = ListOverridesUseCase(override_store, engine)
    assign_role_permission = AssignRolePermissionUseCase(uow_factory, registry, engine)
    remove_role_permission = RemoveRolePermissionUseCase(uow_factory, registry, engine)

    app = falcon.asgi.App(
        middleware=[AuthBypassMiddleware(), AuthorizationMiddleware(engine)]
    )
    app.add_route("/v1/health", HealthResource(registry))
    app.add_route("/v1/resources", ResourcesResource(registry))
    app.add_route("/v1/resources/{name}", ResourceResource(registry))
    app.add_route(
        "/v1/roles/{role}/permissions",
        RolePermissionsResource(registry, assign_role_permission),
    )
    app.add_route(
        "/v1/roles/{role}/permissions/{resource}/{action}",
        RolePermissionResource(remove_role_permission),
    )
    app.add_route("/v1/permissions/check", PermissionCheckResource(engine))
    app.add_route("/v1/permissions/check-many", PermissionCheckManyResource(engine))
    app.add_route("/v1/permissions/me", MyPermissionsResource(engine))
    app.add_route(
        "/v1/users/{user_id}/overrides",
        UserOverridesResource(list_overrides, grant_override),
    )
    app.add_route("/v1/overrides/{override_id}", OverrideResource(revoke_override))
    return app


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
