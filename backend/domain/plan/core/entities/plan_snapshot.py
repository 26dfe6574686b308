"""PlanSnapshot entity - one immutable computation cycle for a user."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from ..exceptions.domain_errors import PlanDomainError
from ..value_objects.computed_targets import ComputedTargets
from ..value_objects.plan_id import PlanId
from ..value_objects.plan_status import PlanStatus
from ..value_objects.projection import Projection
from ..value_objects.why_it_works import WhyItWorks


@dataclass(frozen=True)
class PlanSnapshot:
    """Versioned record of the targets computed for a user.

    Snapshots are append-only: history is kept forever and the only
    transition is ACTIVE -> SUPERSEDED, which yields a new instance
    rather than mutating this one.

    Attributes:
        plan_id: Unique plan identifier
        user_id: Owner of the plan
        created_at: Computation timestamp (UTC)
        targets: Computed daily targets
        projection: Timeline to target weight, if any
        why_it_works: Educational explanation of the targets
        inputs_fingerprint: Digest of the biometrics the plan was built from
        status: ACTIVE or SUPERSEDED
        superseded_at: When the plan stopped being active
    """

    plan_id: PlanId
    user_id: str
    created_at: datetime
    targets: ComputedTargets
    projection: Optional[Projection]
    why_it_works: WhyItWorks
    inputs_fingerprint: str
    status: PlanStatus = PlanStatus.ACTIVE
    superseded_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        """Validate snapshot invariants.

        Raises:
            PlanDomainError: If user id is empty or timestamps are naive
        """
        if not self.user_id or not self.user_id.strip():
            raise PlanDomainError("User ID cannot be empty")

        if self.created_at.tzinfo is None:
            raise PlanDomainError("created_at must be timezone-aware")

    @staticmethod
    def create(
        user_id: str,
        targets: ComputedTargets,
        projection: Optional[Projection],
        why_it_works: WhyItWorks,
        inputs_fingerprint: str,
        created_at: Optional[datetime] = None,
    ) -> "PlanSnapshot":
        """Build a new active snapshot with a fresh plan id."""
        return PlanSnapshot(
            plan_id=PlanId.generate(),
            user_id=user_id,
            created_at=created_at or datetime.now(timezone.utc),
            targets=targets,
            projection=projection,
            why_it_works=why_it_works,
            inputs_fingerprint=inputs_fingerprint,
            status=PlanStatus.ACTIVE,
        )

    @property
    def is_active(self) -> bool:
        return self.status is PlanStatus.ACTIVE

    def superseded(self, at: Optional[datetime] = None) -> "PlanSnapshot":
        """Return a superseded copy of this snapshot.

        Raises:
            PlanDomainError: If the snapshot is already superseded
        """
        if not self.is_active:
            raise PlanDomainError(f"Plan {self.plan_id} is already superseded")
        return replace(
            self,
            status=PlanStatus.SUPERSEDED,
            superseded_at=at or datetime.now(timezone.utc),
        )

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        """Seconds elapsed since the plan was created."""
        current = now or datetime.now(timezone.utc)
        return (current - self.created_at).total_seconds()
