"""User override store - per-user grants and denials on top of role permissions."""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID, uuid4

import structlog

from hrauthz.application.ports import UnitOfWorkFactory
from hrauthz.application.services.decision_cache import DecisionCache
from hrauthz.application.services.permission_model import PermissionModelRegistry
from hrauthz.domain.entities import UserOverride
from hrauthz.domain.exceptions import DuplicateOverride, InvalidRequest, ValidationError
from hrauthz.domain.value_objects import Action

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class UserOverrideStore:
    """CRUD over user overrides, with decision cache invalidation on every write.

    Overrides are append/remove only. Reads and writes go through one Unit of
    Work each, so the persistence layer's transaction gives read-after-write
    consistency per user.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        registry: PermissionModelRegistry,
        cache: DecisionCache | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._registry = registry
        self._cache = cache
        self._clock = clock

    async def add_override(
        self,
        user_id: str,
        resource: str,
        action: "Action | str",
        granted: bool,
        granted_by: str,
        expires_at: datetime | None = None,
    ) -> UserOverride:
        """Create an override. Raise DuplicateOverride if an active one exists for the key.

        expires_at must lie in the future (ValidationError otherwise), so an override
        only becomes expired by time passing after it was granted.
        """
        permission = self._registry.current.catalog.permission(resource, action)
        if permission.deprecated:
            raise InvalidRequest(f"Permission '{permission.id}' is deprecated")
        now = self._clock()
        if expires_at is not None:
            expires_at = _as_utc(expires_at)
            if expires_at <= now:
                raise ValidationError("expires_at must be in the future")

        async with self._uow_factory() as uow:
            existing = await uow.overrides.list_for_key(user_id, resource, permission.action)
            if any(o.is_active(now) for o in existing):
                raise DuplicateOverride(
                    f"User '{user_id}' already has an active override for '{permission.id}'"
                )
            override = UserOverride(
                id=uuid4(),
                user_id=user_id,
                resource=resource,
                action=permission.action,
                granted=granted,
                granted_by=granted_by,
                granted_at=now,
                expires_at=expires_at,
            )
            await uow.overrides.create(override)

        self._invalidate(user_id)
        logger.info(
            "override_added",
            override_id=str(override.id),
            user_id=user_id,
            permission=permission.id,
            granted=granted,
            granted_by=granted_by,
            expires_at=expires_at.isoformat() if expires_at else None,
        )
        return override

    async def remove_override(self, override_id: UUID) -> None:
        """Delete an override. Unknown ids are a no-op."""
        async with self._uow_factory() as uow:
            override = await uow.overrides.get_by_id(override_id)
            if override is None:
                logger.debug("override_remove_missing", override_id=str(override_id))
                return
            await uow.overrides.delete(override_id)

        self._invalidate(override.user_id)
        logger.info("override_removed", override_id=str(override_id), user_id=override.user_id)

    async def get_override(self, override_id: UUID) -> UserOverride | None:
        async with self._uow_factory() as uow:
            return await uow.overrides.get_by_id(override_id)

    async def get_overrides_for_user(self, user_id: str) -> list[UserOverride]:
        """All overrides for user, expired ones included."""
        async with self._uow_factory() as uow:
            return await uow.overrides.list_by_user(user_id)

    async def get_active_override(
        self, user_id: str, resource: str, action: "Action | str"
    ) -> UserOverride | None:
        """The unexpired override for the key, most recently granted first."""
        async with self._uow_factory() as uow:
            candidates = await uow.overrides.list_for_key(user_id, resource, str(action))
        now = self._clock()
        active = [o for o in candidates if o.is_active(now)]
        if not active:
            return None
        if len(active) > 1:
            logger.warning(
                "ambiguous_override",
                user_id=user_id,
                resource=resource,
                action=str(action),
                count=len(active),
            )
        return max(active, key=lambda o: o.granted_at)

    async def purge_expired(self) -> int:
        """Delete overrides that have expired. Not needed for correctness."""
        async with self._uow_factory() as uow:
            purged = await uow.overrides.delete_expired(self._clock())
        logger.info("overrides_purged", count=purged)
        return purged

    def _invalidate(self, user_id: str) -> None:
        if self._cache is not None:
            self._cache.invalidate_user(user_id)
