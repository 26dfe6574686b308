"""Sex value object - biological sex category for BMR."""

from enum import Enum


class Sex(str, Enum):
    """Biological sex category used by the Mifflin-St Jeor offset."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

    def bmr_offset(self) -> float:
        """Mifflin-St Jeor constant: +5 male, -161 female, midpoint otherwise."""
        offsets = {
            Sex.MALE: 5.0,
            Sex.FEMALE: -161.0,
            Sex.OTHER: (5.0 + -161.0) / 2,
        }
        return offsets[self]
