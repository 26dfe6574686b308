"""IPlanStore port - durable plan snapshot history."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.plan_snapshot import PlanSnapshot


class IPlanStore(ABC):
    """Port for plan snapshot persistence.

    The store exclusively owns plan history. Implementations must keep
    exactly one ACTIVE snapshot per user under any interleaving of
    concurrent writers, and must report failures as PersistenceError.
    """

    @abstractmethod
    async def get_active(self, user_id: str) -> Optional[PlanSnapshot]:
        """Find the active plan for a user.

        Args:
            user_id: User identifier

        Returns:
            Optional[PlanSnapshot]: Active plan, or None if the user has none
        """
        pass

    @abstractmethod
    async def replace_active(self, snapshot: PlanSnapshot) -> Optional[PlanSnapshot]:
        """Supersede the user's active plan and insert ``snapshot`` as active.

        Both writes happen in one transaction: after the call either both
        are visible or neither is.

        Args:
            snapshot: New ACTIVE snapshot

        Returns:
            Optional[PlanSnapshot]: Previously active plan (as it was
                before being superseded), or None

        Raises:
            PersistenceError: If the transaction fails
        """
        pass

    @abstractmethod
    async def list_history(self, user_id: str) -> List[PlanSnapshot]:
        """All snapshots of a user, oldest first."""
        pass

    @abstractmethod
    async def list_active_user_ids(self, limit: int, after: Optional[str] = None) -> List[str]:
        """One page of user ids that currently have an active plan.

        Keyset pagination: ids are returned in ascending order, strictly
        greater than ``after``.

        Args:
            limit: Maximum page size
            after: Last id of the previous page, None for the first page

        Returns:
            List[str]: Up to ``limit`` user ids
        """
        pass

    @abstractmethod
    async def count_active(self) -> int:
        """Number of users with an active plan."""
        pass
