"""Decision cache - short-lived memoization of permission decisions."""

import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog

from hrauthz.domain.entities import Decision

logger = structlog.get_logger(__name__)

ComputeDecision = Callable[[], Awaitable[Decision]]
_Key = tuple[str, str | None, str, str]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class _Entry:
    decision: Decision
    expires_at: datetime


class DecisionCache:
    """TTL cache keyed by (user_id, role, resource, action).

    Entries are either fresh or evicted; nothing stale is ever served. Each
    invalidation bumps an epoch (global or per user). A value computed while an
    invalidation happened is returned to its caller but not stored, so a
    concurrent populate can never resurrect an invalidated decision.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        max_entries: int = 10_000,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[_Key, _Entry] = {}
        self._keys_by_user: dict[str, set[_Key]] = {}
        self._epoch = 0
        self._user_epochs: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_compute(
        self,
        user_id: str,
        resource: str,
        action: str,
        role: str | None,
        compute: ComputeDecision,
    ) -> Decision:
        """Return a fresh cached decision or compute, store and return a new one."""
        key: _Key = (user_id, role, resource, str(action))
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if entry.expires_at > self._clock():
                    return entry.decision
                self._evict(key)
            stamp = self._stamp(user_id)

        decision = await compute()

        with self._lock:
            if stamp == self._stamp(user_id):
                self._store(key, decision)
        return decision

    def invalidate_user(self, user_id: str) -> None:
        """Evict every decision for user_id. Called when the user's overrides change."""
        with self._lock:
            self._user_epochs[user_id] = self._user_epochs.get(user_id, 0) + 1
            for key in self._keys_by_user.pop(user_id, set()):
                self._entries.pop(key, None)
        logger.debug("decision_cache_user_invalidated", user_id=user_id)

    def invalidate_all(self) -> None:
        """Evict everything. Called when role permissions or the catalog change."""
        with self._lock:
            self._epoch += 1
            self._entries.clear()
            self._keys_by_user.clear()
            self._user_epochs.clear()
        logger.debug("decision_cache_invalidated")

    def _stamp(self, user_id: str) -> tuple[int, int]:
        return (self._epoch, self._user_epochs.get(user_id, 0))

    def _store(self, key: _Key, decision: Decision) -> None:
        expires_at = self._clock() + self._ttl
        # A decision backed by an expiring override must not outlive it.
        if decision.valid_until is not None and decision.valid_until < expires_at:
            expires_at = decision.valid_until
        if key not in self._entries and len(self._entries) >= self._max_entries:
            self._evict(next(iter(self._entries)))
        self._entries[key] = _Entry(decision=decision, expires_at=expires_at)
        self._keys_by_user.setdefault(key[0], set()).add(key)

    def _evict(self, key: _Key) -> None:
        self._entries.pop(key, None)
        keys = self._keys_by_user.get(key[0])
        if keys is not None:
            keys.discard(key)
            if not keys:
                del self._keys_by_user[key[0]]
