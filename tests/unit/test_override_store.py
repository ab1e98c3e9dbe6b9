"""Unit tests for UserOverrideStore."""

from datetime import timedelta
from uuid import uuid4

import pytest

from hrauthz.application.services.permission_model import PermissionModel, PermissionModelRegistry
from hrauthz.application.services.override_store import UserOverrideStore
from hrauthz.domain.catalog import PermissionCatalog, ResourceDefinition
from hrauthz.domain.defaults import ROLE_PARENTS
from hrauthz.domain.entities import Decision, UserOverride
from hrauthz.domain.exceptions import DuplicateOverride, InvalidRequest, ValidationError
from hrauthz.domain.hierarchy import RoleHierarchy
from hrauthz.domain.value_objects import Action, DecisionReason


def _override(clock, granted=True, granted_at=None, expires_at=None, user_id="u1"):
    return UserOverride(
        id=uuid4(),
        user_id=user_id,
        resource="analytics",
        action=Action.VIEW,
        granted=granted,
        granted_by="admin-1",
        granted_at=granted_at or clock(),
        expires_at=expires_at,
    )


@pytest.mark.asyncio
async def test_add_override_persists_and_commits(override_store, fake_uow, clock) -> None:
    override = await override_store.add_override(
        "u1", "analytics", "view", granted=True, granted_by="admin-1"
    )

    assert override.action == Action.VIEW
    assert override.granted_at == clock()
    assert override.expires_at is None
    assert fake_uow.commits == 1
    assert await override_store.get_override(override.id) == override


@pytest.mark.asyncio
async def test_add_duplicate_active_override_raises(override_store) -> None:
    await override_store.add_override("u1", "analytics", "view", granted=True, granted_by="a")
    with pytest.raises(DuplicateOverride):
        await override_store.add_override("u1", "analytics", "view", granted=False, granted_by="a")


@pytest.mark.asyncio
async def test_add_allowed_when_previous_override_expired(override_store, fake_uow, clock) -> None:
    fake_uow.overrides.add(_override(clock, expires_at=clock() + timedelta(minutes=1)))
    clock.advance(120)

    override = await override_store.add_override(
        "u1", "analytics", "view", granted=False, granted_by="a"
    )
    assert len(await override_store.get_overrides_for_user("u1")) == 2
    assert await override_store.get_active_override("u1", "analytics", "view") == override


@pytest.mark.asyncio
async def test_add_override_for_invalid_pair_raises(override_store) -> None:
    with pytest.raises(InvalidRequest):
        await override_store.add_override("u1", "settings", "delete", granted=True, granted_by="a")


@pytest.mark.asyncio
async def test_add_override_with_past_expiry_raises(override_store, clock) -> None:
    with pytest.raises(ValidationError):
        await override_store.add_override(
            "u1", "analytics", "view", granted=True, granted_by="a", expires_at=clock()
        )


@pytest.mark.asyncio
async def test_naive_expiry_is_taken_as_utc(override_store, clock) -> None:
    naive = (clock() + timedelta(hours=1)).replace(tzinfo=None)
    override = await override_store.add_override(
        "u1", "analytics", "view", granted=True, granted_by="a", expires_at=naive
    )
    assert override.expires_at == clock() + timedelta(hours=1)


@pytest.mark.asyncio
async def test_add_override_on_deprecated_permission_raises(uow_factory, cache, clock) -> None:
    catalog = PermissionCatalog.from_definitions(
        [
            ResourceDefinition(
                name="goals",
                label="Goal Management",
                description="Goals",
                actions=("view", "create"),
                deprecated_actions=("create",),
            )
        ]
    )
    model = PermissionModel(catalog, RoleHierarchy.build(catalog, ROLE_PARENTS, {}))
    store = UserOverrideStore(uow_factory, PermissionModelRegistry(model), cache, clock)

    with pytest.raises(InvalidRequest, match="deprecated"):
        await store.add_override("u1", "goals", "create", granted=True, granted_by="a")


@pytest.mark.asyncio
async def test_remove_override_is_idempotent(override_store) -> None:
    override = await override_store.add_override(
        "u1", "analytics", "view", granted=True, granted_by="a"
    )
    await override_store.remove_override(override.id)
    await override_store.remove_override(override.id)
    await override_store.remove_override(uuid4())

    assert await override_store.get_override(override.id) is None


@pytest.mark.asyncio
async def test_expired_override_is_inert(override_store, fake_uow, clock) -> None:
    fake_uow.overrides.add(_override(clock, expires_at=clock() + timedelta(seconds=10)))
    assert await override_store.get_active_override("u1", "analytics", "view") is not None

    clock.advance(10)

    assert await override_store.get_active_override("u1", "analytics", "view") is None


@pytest.mark.asyncio
async def test_ambiguous_overrides_pick_most_recent(override_store, fake_uow, clock) -> None:
    older = _override(clock, granted=True, granted_at=clock() - timedelta(days=1))
    newer = _override(clock, granted=False)
    fake_uow.overrides.add(older)
    fake_uow.overrides.add(newer)

    assert await override_store.get_active_override("u1", "analytics", Action.VIEW) == newer


@pytest.mark.asyncio
async def test_write_invalidates_cached_decisions_for_user(override_store, cache) -> None:
    async def compute() -> Decision:
        return Decision(
            allowed=False,
            reason=DecisionReason.NO_GRANT,
            resource="analytics",
            action="view",
            role="employee",
        )

    await cache.get_or_compute("u1", "analytics", "view", "employee", compute)
    await cache.get_or_compute("u2", "analytics", "view", "employee", compute)

    await override_store.add_override("u1", "analytics", "view", granted=True, granted_by="a")

    assert len(cache) == 1


@pytest.mark.asyncio
async def test_purge_expired_deletes_only_expired(override_store, fake_uow, clock) -> None:
    fake_uow.overrides.add(_override(clock, expires_at=clock() - timedelta(seconds=1)))
    fake_uow.overrides.add(_override(clock, expires_at=clock() + timedelta(days=1), user_id="u2"))
    fake_uow.overrides.add(_override(clock, user_id="u3"))

    assert await override_store.purge_expired() == 1
    assert await override_store.get_overrides_for_user("u1") == []
    assert len(await override_store.get_overrides_for_user("u2")) == 1
