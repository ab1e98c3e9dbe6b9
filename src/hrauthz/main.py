"""Application entry point and composition root."""

import falcon
import falcon.asgi
import structlog

from hrauthz import __version__
from hrauthz.application.services.decision_cache import DecisionCache
from hrauthz.application.services.decision_engine import PermissionDecisionEngine
from hrauthz.application.services.override_store import UserOverrideStore
from hrauthz.application.services.permission_model import (
    PermissionModel,
    PermissionModelRegistry,
)
from hrauthz.application.use_cases.override.grant_override import GrantOverrideUseCase
from hrauthz.application.use_cases.override.list_overrides import ListOverridesUseCase
from hrauthz.application.use_cases.override.revoke_override import RevokeOverrideUseCase
from hrauthz.application.use_cases.role_permission.assign_role_permission import (
    AssignRolePermissionUseCase,
)
from hrauthz.application.use_cases.role_permission.remove_role_permission import (
    RemoveRolePermissionUseCase,
)
from hrauthz.config import Settings, get_settings
from hrauthz.infrastructure.auth.keycloak_provider import KeycloakProvider
from hrauthz.infrastructure.persistence.postgres.connection import create_pool, ping
from hrauthz.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from hrauthz.interfaces.api.middleware.auth import AuthMiddleware
from hrauthz.interfaces.api.middleware.authorization import AuthorizationMiddleware
from hrauthz.interfaces.api.middleware.lifespan import LifespanMiddleware
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
from hrauthz.logging_setup import configure_logging

logger = structlog.get_logger(__name__)


def main() -> None:
    """CLI entry point: serve the API."""
    logger.info("starting", version=__version__)
    run_server()


def build_decision_cache(settings: Settings) -> DecisionCache | None:
    if not settings.decision_cache_enabled:
        return None
    return DecisionCache(
        ttl_seconds=settings.decision_cache_ttl_seconds,
        max_entries=settings.decision_cache_max_entries,
    )


def create_hrauthz_app() -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level, json=settings.log_json)

    pool = create_pool(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
        timeout=settings.database_timeout_seconds,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )

    # Bundled matrix until LifespanMiddleware loads the persisted one.
    cache = build_decision_cache(settings)
    registry = PermissionModelRegistry(PermissionModel.default(), cache=cache)
    override_store = UserOverrideStore(uow_factory, registry, cache=cache)
    engine = PermissionDecisionEngine(registry, override_store, cache=cache)

    grant_override = GrantOverrideUseCase(override_store, engine)
    revoke_override = RevokeOverrideUseCase(override_store, engine)
    list_overrides = ListOverridesUseCase(override_store, engine)
    assign_role_permission = AssignRolePermissionUseCase(uow_factory, registry, engine)
    remove_role_permission = RemoveRolePermissionUseCase(uow_factory, registry, engine)

    app = falcon.asgi.App(
        middleware=[
            LifespanMiddleware(pool, registry, uow_factory),
            AuthMiddleware(keycloak),
            AuthorizationMiddleware(engine),
        ],
    )

    async def log_exception(req, resp, ex, params):
        logger.error(
            "unhandled_exception",
            method=req.method,
            path=req.path,
            exc_info=(type(ex), ex, ex.__traceback__),
        )
        resp.status = falcon.HTTP_500
        resp.media = {"error": "Internal Server Error"}

    health = HealthResource(registry, store_probe=lambda: ping(pool))

    app.add_error_handler(Exception, log_exception)
    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")
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


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    settings = get_settings()
    app = create_hrauthz_app()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
