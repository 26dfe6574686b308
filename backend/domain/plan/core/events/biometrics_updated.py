"""BiometricsUpdated domain event."""

from dataclasses import dataclass

from .base import DomainEvent

# Fields whose change makes a cached plan stale.
PLAN_AFFECTING_FIELDS = frozenset(
    {
        "weight",
        "height",
        "date_of_birth",
        "sex",
        "goal",
        "activity_level",
        "target_weight",
        "target_date",
    }
)


@dataclass(frozen=True)
class BiometricsUpdated(DomainEvent):
    """Published by the profile collaborator after a biometric mutation.

    Attributes:
        user_id: User whose profile changed
        updated_fields: Names of the fields that changed
    """

    user_id: str
    updated_fields: tuple[str, ...]

    @staticmethod
    def create(user_id: str, updated_fields: list[str]) -> "BiometricsUpdated":
        """Factory method to create event."""
        return BiometricsUpdated(
            event_id=DomainEvent._generate_event_id(),
            occurred_at=DomainEvent._now(),
            user_id=user_id,
            updated_fields=tuple(updated_fields),
        )

    def affects_plan(self) -> bool:
        """True when at least one changed field feeds the calculation."""
        return any(name in PLAN_AFFECTING_FIELDS for name in self.updated_fields)
