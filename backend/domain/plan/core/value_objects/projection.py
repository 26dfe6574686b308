"""Projection value object - timeline to reach a target weight."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict


@dataclass(frozen=True)
class Projection:
    """Estimated timeline from current weight to target weight.

    Only built when a target weight is set, the weekly rate is non-zero
    and target differs from start.

    Attributes:
        estimated_weeks: ceil(|target - start| / |weekly rate|)
        projected_date: Date the target is expected to be reached
        start_weight: Weight at computation time (kg)
        target_weight: Goal weight (kg)
    """

    estimated_weeks: int
    projected_date: date
    start_weight: float
    target_weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated_weeks": self.estimated_weeks,
            "projected_date": self.projected_date.isoformat(),
            "start_weight": self.start_weight,
            "target_weight": self.target_weight,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Projection":
        return Projection(
            estimated_weeks=int(data["estimated_weeks"]),
            projected_date=date.fromisoformat(data["projected_date"]),
            start_weight=float(data["start_weight"]),
            target_weight=float(data["target_weight"]),
        )
