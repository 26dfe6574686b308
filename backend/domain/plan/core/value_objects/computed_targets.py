"""ComputedTargets value object - daily targets for one computation."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ComputedTargets:
    """Daily energy, protein and hydration targets.

    ``bmr`` and ``tdee`` are derived values and are only persisted as
    part of a plan snapshot.

    Attributes:
        bmr: Basal metabolic rate (kcal/day)
        tdee: Total daily energy expenditure (kcal/day), never below bmr
        calorie_target: tdee plus the goal's signed offset (kcal/day)
        protein_target_grams: Daily protein target (g)
        water_target_ml: Daily water target (ml)
        weekly_rate_kg_per_week: Expected weight change, negative for loss
    """

    bmr: int
    tdee: int
    calorie_target: int
    protein_target_grams: int
    water_target_ml: int
    weekly_rate_kg_per_week: float

    def __post_init__(self) -> None:
        """Validate the BMR/TDEE ordering.

        Raises:
            ValueError: If tdee is below bmr
        """
        if self.tdee < self.bmr:
            raise ValueError(f"TDEE ({self.tdee}) must not be below BMR ({self.bmr})")

    @property
    def calorie_offset(self) -> int:
        """Signed difference between calorie target and TDEE."""
        return self.calorie_target - self.tdee

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bmr": self.bmr,
            "tdee": self.tdee,
            "calorie_target": self.calorie_target,
            "protein_target_grams": self.protein_target_grams,
            "water_target_ml": self.water_target_ml,
            "weekly_rate_kg_per_week": self.weekly_rate_kg_per_week,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ComputedTargets":
        return ComputedTargets(
            bmr=int(data["bmr"]),
            tdee=int(data["tdee"]),
            calorie_target=int(data["calorie_target"]),
            protein_target_grams=int(data["protein_target_grams"]),
            water_target_ml=int(data["water_target_ml"]),
            weekly_rate_kg_per_week=float(data["weekly_rate_kg_per_week"]),
        )
