"""PlanId value object - unique identifier for plan snapshots."""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class PlanId:
    """Unique identifier for a plan snapshot.

    Immutable value object wrapping a UUID.
    """

    value: UUID

    @staticmethod
    def generate() -> "PlanId":
        """Generate a new unique plan ID.

        Returns:
            PlanId: New plan ID with generated UUID
        """
        return PlanId(value=uuid4())

    @staticmethod
    def from_string(id_str: str) -> "PlanId":
        """Create PlanId from string representation.

        Args:
            id_str: String representation of UUID

        Returns:
            PlanId: Plan ID from parsed UUID

        Raises:
            ValueError: If string is not a valid UUID
        """
        try:
            return PlanId(value=UUID(id_str))
        except ValueError as e:
            raise ValueError(f"Invalid plan ID format: {id_str}") from e

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"PlanId(value={self.value})"
