"""Lifespan middleware - opens the pool and loads the permission model on startup."""

from typing import Any

import structlog
from psycopg_pool import AsyncConnectionPool

from hrauthz.application.ports import UnitOfWorkFactory
from hrauthz.application.services.permission_model import PermissionModelRegistry

logger = structlog.get_logger(__name__)


class LifespanMiddleware:
    """Opens the connection pool, then replaces the bundled permission model with
    the persisted one. A ConfigurationError here aborts startup."""

    def __init__(
        self,
        pool: AsyncConnectionPool,
        registry: PermissionModelRegistry,
        unit_of_work_factory: UnitOfWorkFactory,
    ) -> None:
        self._pool = pool
        self._registry = registry
        self._uow_factory = unit_of_work_factory

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Open pool and load role permissions when ASGI server starts."""
        await self._pool.open()
        await self._registry.reload(self._uow_factory)
        logger.info("startup_complete")

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Close pool when ASGI server shuts down."""
        await self._pool.close()
