"""PlanGenerated domain event."""

from dataclasses import dataclass
from uuid import UUID

from .base import DomainEvent


@dataclass(frozen=True)
class PlanGenerated(DomainEvent):
    """Emitted after a new plan snapshot has been persisted.

    Attributes:
        plan_id: ID of the new active plan
        user_id: Owner of the plan
        previous_plan_id: Plan that was superseded, if any
    """

    plan_id: UUID
    user_id: str
    previous_plan_id: UUID | None

    @staticmethod
    def create(plan_id: UUID, user_id: str, previous_plan_id: UUID | None) -> "PlanGenerated":
        """Factory method to create event."""
        return PlanGenerated(
            event_id=DomainEvent._generate_event_id(),
            occurred_at=DomainEvent._now(),
            plan_id=plan_id,
            user_id=user_id,
            previous_plan_id=previous_plan_id,
        )
