"""Plan result cache port."""

from datetime import timedelta
from typing import Optional, Protocol

from ..entities.plan_snapshot import PlanSnapshot


class IPlanResultCache(Protocol):
    """Port for the read-through plan cache.

    The cache is non-authoritative: it may be dropped at any time and
    rebuilt from the plan store. Implementations may raise
    CacheUnavailableError, which callers treat as a miss.
    """

    async def get(self, user_id: str) -> Optional[PlanSnapshot]:
        """Cached plan, or None on miss or expiry."""
        ...

    async def put(self, user_id: str, snapshot: PlanSnapshot, ttl: Optional[timedelta] = None) -> None:
        """Store ``snapshot`` for ``user_id``, overwriting any entry."""
        ...

    async def invalidate(self, user_id: str) -> None:
        """Drop the entry for ``user_id`` immediately."""
        ...
