"""TTL cache with stale reads for degraded views."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

ADMIN_USERS_PREFIX = "admin:users:"
WEEKLY_STATS_PREFIX = "stats:week:"


class Cache(Protocol):
    """Cache interface for computed results."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def get_stale(self, key: str) -> object | None:
        """Return the last cached value even if it has expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value with a TTL in seconds."""

    def delete_prefix(self, prefix: str) -> None:
        """Drop every value whose key starts with ``prefix``."""


@dataclass(frozen=True)
class _Slot:
    value: object
    stored_at: datetime
    ttl: timedelta

    def fresh_at(self, moment: datetime) -> bool:
        return moment < self.stored_at + self.ttl


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryCache(Cache):
    """Process-local cache that keeps expired values for stale fallbacks.

    Expired slots stay readable through ``get_stale`` until they are
    overwritten, deleted, or pushed out once ``max_entries`` is exceeded, oldest
    write first.
    """

    clock: Callable[[], datetime] = field(default=_utc_now)
    max_entries: int = 1024
    _slots: dict[str, _Slot] = field(default_factory=dict, init=False, repr=False)

    def get(self, key: str) -> object | None:
        slot = self._slots.get(key)
        if slot is None or not slot.fresh_at(self.clock()):
            return None
        return slot.value

    def get_stale(self, key: str) -> object | None:
        slot = self._slots.get(key)
        return slot.value if slot else None

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        self._slots.pop(key, None)
        self._slots[key] = _Slot(
            value=value, stored_at=self.clock(), ttl=timedelta(seconds=ttl_seconds)
        )
        while len(self._slots) > self.max_entries:
            del self._slots[next(iter(self._slots))]

    def delete_prefix(self, prefix: str) -> None:
        for key in [key for key in self._slots if key.startswith(prefix)]:
            del self._slots[key]


def weekly_stats_key(user_id: object, week: object) -> str:
    """Return the cache key for a user's weekly stats."""
    return f"{WEEKLY_STATS_PREFIX}{user_id}:{week}"


def admin_users_key(week: object) -> str:
    """Return the cache key for the admin weekly overview."""
    return f"{ADMIN_USERS_PREFIX}{week}"


def invalidate_user_goals(cache: Cache, user_id: object) -> None:
    """Forget views built from a user's goals after they change."""
    cache.delete_prefix(f"{WEEKLY_STATS_PREFIX}{user_id}:")
    cache.delete_prefix(ADMIN_USERS_PREFIX)
