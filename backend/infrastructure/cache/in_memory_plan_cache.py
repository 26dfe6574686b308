"""
In-memory plan result cache with TTL.

Read-through cache in front of the plan store. Expiry is checked lazily
on read; there is no background eviction.
"""

import asyncio
import weakref
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import structlog

from domain.plan.core.entities.plan_snapshot import PlanSnapshot

logger = structlog.get_logger(__name__)

DEFAULT_PLAN_TTL = timedelta(days=7)


@dataclass(frozen=True)
class PlanCacheEntry:
    """Immutable cache entry; replaced as a whole on every write."""

    snapshot: PlanSnapshot
    cached_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class InMemoryPlanCache:
    """In-memory implementation of the plan result cache.

    Access to one user's entry is serialized by a per-user asyncio.Lock;
    different users never share a lock. Entries are immutable, so a
    reader sees either the old or the new entry, never a partial one.
    NOT shared across processes (use a distributed cache for that).
    """

    def __init__(self, default_ttl: timedelta = DEFAULT_PLAN_TTL) -> None:
        """Initialize empty cache.

        Args:
            default_ttl: TTL used when ``put`` is called without one
                (default 7 days, matching the weekly recompute)
        """
        self.default_ttl = default_ttl
        self._entries: Dict[str, PlanCacheEntry] = {}
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    async def get(self, user_id: str) -> Optional[PlanSnapshot]:
        """Get the cached plan for a user.

        Args:
            user_id: User identifier

        Returns:
            Cached snapshot if present and not expired, None otherwise
        """
        async with self._lock_for(user_id):
            entry = self._entries.get(user_id)
            if entry is None:
                logger.debug("plan_cache.miss", user_id=user_id)
                return None

            if entry.is_expired(datetime.now(timezone.utc)):
                logger.debug("plan_cache.expired", user_id=user_id)
                self._entries.pop(user_id, None)
                return None

            logger.debug("plan_cache.hit", user_id=user_id, plan_id=str(entry.snapshot.plan_id))
            return entry.snapshot

    async def put(
        self,
        user_id: str,
        snapshot: PlanSnapshot,
        ttl: Optional[timedelta] = None,
    ) -> None:
        """Cache a plan, overwriting any existing entry.

        Args:
            user_id: User identifier
            snapshot: Plan to cache
            ttl: Time-to-live (defaults to ``default_ttl``)
        """
        lifetime = ttl if ttl is not None else self.default_ttl
        now = datetime.now(timezone.utc)
        entry = PlanCacheEntry(snapshot=snapshot, cached_at=now, expires_at=now + lifetime)

        async with self._lock_for(user_id):
            self._entries[user_id] = entry

        logger.debug(
            "plan_cache.put",
            user_id=user_id,
            plan_id=str(snapshot.plan_id),
            ttl_seconds=lifetime.total_seconds(),
        )

    async def invalidate(self, user_id: str) -> None:
        """Remove a user's entry immediately (no-op if absent).

        Args:
            user_id: User identifier
        """
        async with self._lock_for(user_id):
            removed = self._entries.pop(user_id, None)

        if removed is not None:
            logger.debug("plan_cache.invalidated", user_id=user_id)

    async def get_entry(self, user_id: str) -> Optional[PlanCacheEntry]:
        """Raw entry including timestamps, without expiry handling."""
        async with self._lock_for(user_id):
            return self._entries.get(user_id)

    def clear(self) -> None:
        """Clear all cache entries (for testing)."""
        self._entries.clear()
        logger.info("plan_cache.cleared")

    def purge_expired(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of expired entries removed
        """
        now = datetime.now(timezone.utc)
        expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]

        for key in expired_keys:
            self._entries.pop(key, None)

        if expired_keys:
            logger.info("plan_cache.purged", count=len(expired_keys))

        return len(expired_keys)

    def size(self) -> int:
        """Number of cached entries (expired ones included until read)."""
        return len(self._entries)
