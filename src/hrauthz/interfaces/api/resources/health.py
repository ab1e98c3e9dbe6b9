"""Health check endpoints."""

from collections.abc import Awaitable, Callable

import falcon.asgi

from hrauthz.application.services.permission_model import PermissionModelRegistry


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(
        self,
        registry: PermissionModelRegistry,
        store_probe: Callable[[], Awaitable[bool]] | None = None,
    ) -> None:
        self._registry = registry
        self._store_probe = store_probe

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness (permission store, loaded catalog)."""
        catalog = self._registry.current.catalog
        store_ok = True
        if self._store_probe is not None:
            try:
                store_ok = await self._store_probe()
            except Exception:
                store_ok = False
        resp.media = {
            "status": "ready" if store_ok else "unavailable",
            "resources": len(catalog),
            "permissions": len(catalog.list_permissions()),
        }
        resp.status = falcon.HTTP_200 if store_ok else falcon.HTTP_503
