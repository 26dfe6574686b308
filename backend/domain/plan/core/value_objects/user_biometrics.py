"""UserBiometrics value object - inputs for target calculation."""

import hashlib
import json
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from .activity_level import ActivityLevel
from .goal import Goal
from .sex import Sex

WEIGHT_RANGE = (30.0, 300.0)
HEIGHT_RANGE = (100.0, 250.0)
AGE_RANGE = (13, 120)


@dataclass(frozen=True)
class UserBiometrics:
    """User biometric data as supplied by the profile collaborator.

    Unlike a storage schema, construction never fails: a record read from
    the profile store may be partially filled or hold values outside the
    ranges the formulas are valid for. ``validation_errors()`` reports
    both, and only computable records reach the calculator.

    Attributes:
        weight: Body weight in kilograms (30-300 kg)
        height: Height in centimeters (100-250 cm)
        age: Age in years (13-120)
        sex: Biological sex category
        goal: Primary goal
        activity_level: Physical activity level
        target_weight: Optional goal weight in kilograms (30-300 kg)
        target_date: Optional date the user wants to reach target_weight
    """

    weight: Optional[float]
    height: Optional[float]
    age: Optional[int]
    sex: Optional[Sex]
    goal: Optional[Goal]
    activity_level: Optional[ActivityLevel]
    target_weight: Optional[float] = None
    target_date: Optional[date] = None

    def validation_errors(self) -> List[str]:
        """List invariant violations, naming fields only (never values).

        Returns:
            List[str]: One message per missing or out-of-range field,
                empty when the record is computable
        """
        errors: List[str] = []

        for field_name in ("weight", "height", "age", "sex", "goal", "activity_level"):
            if getattr(self, field_name) is None:
                errors.append(f"{field_name}: missing")

        if self.weight is not None and not _in_range(self.weight, WEIGHT_RANGE):
            errors.append("weight: must be 30-300 kg")

        if self.height is not None and not _in_range(self.height, HEIGHT_RANGE):
            errors.append("height: must be 100-250 cm")

        if self.age is not None and not _in_range(self.age, AGE_RANGE):
            errors.append("age: must be 13-120 years")

        if self.target_weight is not None and not _in_range(self.target_weight, WEIGHT_RANGE):
            errors.append("target_weight: must be 30-300 kg")

        return errors

    def is_computable(self) -> bool:
        """Check whether the record satisfies every invariant."""
        return not self.validation_errors()

    def fingerprint(self) -> str:
        """Stable digest of every computation input.

        Two records with the same fingerprint produce the same targets,
        so a stored plan can be matched against current biometrics
        without recomputing.

        Returns:
            str: Hex SHA-256 digest
        """
        payload = {
            "weight": self.weight,
            "height": self.height,
            "age": self.age,
            "sex": self.sex.value if self.sex else None,
            "goal": self.goal.value if self.goal else None,
            "activity_level": self.activity_level.value if self.activity_level else None,
            "target_weight": self.target_weight,
            "target_date": self.target_date.isoformat() if self.target_date else None,
        }
        canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _in_range(value: float, bounds: tuple) -> bool:
    low, high = bounds
    return low <= value <= high
