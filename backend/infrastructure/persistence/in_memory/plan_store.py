"""In-memory implementation of IPlanStore for testing and development."""

import asyncio
from typing import Dict, List, Optional

import structlog

from domain.plan.core.entities.plan_snapshot import PlanSnapshot
from domain.plan.core.exceptions.domain_errors import PersistenceError
from domain.plan.core.ports.plan_store import IPlanStore

logger = structlog.get_logger(__name__)


class InMemoryPlanStore(IPlanStore):
    """
    In-memory implementation of the plan store.

    Keeps an append-only list of snapshots per user. The supersede and
    insert steps of ``replace_active`` run under a per-user lock and
    publish the new history with a single assignment, so concurrent
    writers can never leave zero or two active plans. Data is lost when
    the process stops.
    """

    def __init__(self) -> None:
        """Initialize empty store."""
        self._history: Dict[str, List[PlanSnapshot]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self.write_count = 0

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        return self._locks.setdefault(user_id, asyncio.Lock())

    async def get_active(self, user_id: str) -> Optional[PlanSnapshot]:
        for snapshot in reversed(self._history.get(user_id, [])):
            if snapshot.is_active:
                return snapshot
        return None

    async def replace_active(self, snapshot: PlanSnapshot) -> Optional[PlanSnapshot]:
        """
        Supersede the active plan and append ``snapshot`` atomically.

        Args:
            snapshot: New active snapshot

        Returns:
            Previously active snapshot, or None

        Raises:
            PersistenceError: If ``snapshot`` is not active
        """
        if not snapshot.is_active:
            raise PersistenceError(
                f"Cannot insert non-active plan {snapshot.plan_id}", user_id=snapshot.user_id
            )

        async with self._lock_for(snapshot.user_id):
            current = self._history.get(snapshot.user_id, [])
            previous: Optional[PlanSnapshot] = None
            updated: List[PlanSnapshot] = []

            for existing in current:
                if existing.is_active:
                    previous = existing
                    updated.append(existing.superseded(at=snapshot.created_at))
                else:
                    updated.append(existing)

            updated.append(snapshot)
            self._history[snapshot.user_id] = updated
            self.write_count += 1

        logger.debug(
            "plan_store.replaced_active",
            user_id=snapshot.user_id,
            plan_id=str(snapshot.plan_id),
            previous_plan_id=str(previous.plan_id) if previous else None,
        )
        return previous

    async def list_history(self, user_id: str) -> List[PlanSnapshot]:
        return list(self._history.get(user_id, []))

    async def list_active_user_ids(self, limit: int, after: Optional[str] = None) -> List[str]:
        user_ids = sorted(
            user_id
            for user_id, history in self._history.items()
            if any(snapshot.is_active for snapshot in history)
            and (after is None or user_id > after)
        )
        return user_ids[:limit]

    async def count_active(self) -> int:
        return sum(
            1
            for history in self._history.values()
            if any(snapshot.is_active for snapshot in history)
        )

    def clear(self) -> None:
        """
        Clear all plans from memory.

        Useful for test cleanup.
        """
        self._history.clear()
        self._locks.clear()
        self.write_count = 0
