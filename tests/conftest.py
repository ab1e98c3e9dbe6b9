"""Pytest fixtures for hrauthz tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from hrauthz.application.services.decision_cache import DecisionCache
from hrauthz.application.services.decision_engine import PermissionDecisionEngine
from hrauthz.application.services.override_store import UserOverrideStore
from hrauthz.application.services.permission_model import (
    PermissionModel,
    PermissionModelRegistry,
)
from hrauthz.domain.entities import Decision, RolePermission, UserOverride
from hrauthz.domain.value_objects import DecisionReason


# --- Fake repositories ---


class FakeOverrideRepository:
    """In-memory user override repository."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, UserOverride] = {}

    async def get_by_id(self, override_id: UUID) -> UserOverride | None:
        return self._by_id.get(override_id)

    async def list_by_user(self, user_id: str) -> list[UserOverride]:
        return [o for o in self._by_id.values() if o.user_id == user_id]

    async def list_for_key(
        self, user_id: str, resource: str, action: str
    ) -> list[UserOverride]:
        return [
            o
            for o in self._by_id.values()
            if o.user_id == user_id and o.resource == resource and o.action == action
        ]

    async def create(self, override: UserOverride) -> UserOverride:
        self._by_id[override.id] = override
        return override

    async def delete(self, override_id: UUID) -> None:
        self._by_id.pop(override_id, None)

    async def delete_expired(self, before: datetime) -> int:
        expired = [
            o.id
            for o in self._by_id.values()
            if o.expires_at is not None and o.expires_at <= before
        ]
        for override_id in expired:
            del self._by_id[override_id]
        return len(expired)

    def add(self, override: UserOverride) -> None:
        """Helper to insert an override directly, bypassing duplicate checks."""
        self._by_id[override.id] = override


class FakeRolePermissionRepository:
    """In-memory role permission repository."""

    def __init__(self) -> None:
        self._rows: list[RolePermission] = []

    async def list_all(self) -> list[RolePermission]:
        return list(self._rows)

    async def add(self, role_permission: RolePermission) -> None:
        if role_permission not in self._rows:
            self._rows.append(role_permission)

    async def remove(self, role_permission: RolePermission) -> None:
        if role_permission in self._rows:
            self._rows.remove(role_permission)


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.overrides = FakeOverrideRepository()
        self.role_permissions = FakeRolePermissionRepository()
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass


class FakeClock:
    """Settable UTC clock."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 1, 15, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory yielding the same FakeUnitOfWork, committing on success."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow
        await uow.commit()

    return _factory


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the shared FakeUnitOfWork."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> DecisionCache:
    return DecisionCache(ttl_seconds=30, clock=clock)


@pytest.fixture
def registry(cache: DecisionCache) -> PermissionModelRegistry:
    return PermissionModelRegistry(PermissionModel.default(), cache=cache)


@pytest.fixture
def override_store(uow_factory, registry, cache, clock) -> UserOverrideStore:
    return UserOverrideStore(uow_factory, registry, cache=cache, clock=clock)


@pytest.fixture
def engine(registry, override_store, cache) -> PermissionDecisionEngine:
    return PermissionDecisionEngine(registry, override_store, cache=cache)


@pytest.fixture
def mock_permission_decider():
    """AsyncMock for PermissionDecider - allows everything by default."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.decide.return_value = Decision(
        allowed=True,
        reason=DecisionReason.ROLE_GRANTED,
        resource="settings",
        action="admin",
        role="admin",
    )
    return mock
