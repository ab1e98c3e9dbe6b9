"""Permission model snapshot (catalog + hierarchy) and its atomic reload."""

import structlog

from hrauthz.application.ports import UnitOfWorkFactory
from hrauthz.application.services.decision_cache import DecisionCache
from hrauthz.application.services.role_resolver import RolePermissionResolver
from hrauthz.domain.catalog import PermissionCatalog
from hrauthz.domain.defaults import RESOURCES, ROLE_GRANTS, ROLE_PARENTS
from hrauthz.domain.hierarchy import RoleHierarchy

logger = structlog.get_logger(__name__)


class PermissionModel:
    """Read-only snapshot: catalog, hierarchy and the resolver memoized over them."""

    def __init__(self, catalog: PermissionCatalog, hierarchy: RoleHierarchy) -> None:
        self.catalog = catalog
        self.hierarchy = hierarchy
        self.resolver = RolePermissionResolver(hierarchy)

    @classmethod
    def default(cls) -> "PermissionModel":
        """Model built from the bundled HR permission matrix."""
        catalog = PermissionCatalog.from_definitions(RESOURCES)
        return cls(catalog, RoleHierarchy.build(catalog, ROLE_PARENTS, ROLE_GRANTS))


async def load_permission_model(
    unit_of_work_factory: UnitOfWorkFactory,
    catalog: PermissionCatalog | None = None,
) -> PermissionModel:
    """Build the model from persisted role permissions.

    An empty store means no role holds any permission; the migration seeds the
    bundled matrix. Raises ConfigurationError if a stored row is not in the catalog.
    """
    catalog = catalog or PermissionCatalog.from_definitions(RESOURCES)
    async with unit_of_work_factory() as uow:
        rows = await uow.role_permissions.list_all()
    if not rows:
        logger.warning("role_permissions_empty")
    return PermissionModel(catalog, RoleHierarchy.from_role_permissions(catalog, ROLE_PARENTS, rows))


class PermissionModelRegistry:
    """Holds the active PermissionModel.

    Readers take `current` once per decision, so each decision sees a single
    snapshot. `swap` replaces the reference and evicts every cached decision.
    """

    def __init__(self, model: PermissionModel, cache: DecisionCache | None = None) -> None:
        self._model = model
        self._cache = cache

    @property
    def current(self) -> PermissionModel:
        return self._model

    def swap(self, model: PermissionModel) -> None:
        self._model = model
        if self._cache is not None:
            self._cache.invalidate_all()
        logger.info(
            "permission_model_swapped",
            resources=len(model.catalog),
            permissions=len(model.catalog.list_permissions()),
        )

    async def reload(self, unit_of_work_factory: UnitOfWorkFactory) -> PermissionModel:
        """Reload role permissions from the store, keeping the current catalog."""
        model = await load_permission_model(unit_of_work_factory, self._model.catalog)
        self.swap(model)
        return model
