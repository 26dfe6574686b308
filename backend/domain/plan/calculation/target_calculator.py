"""TargetCalculator - every formula behind a plan.

Pure and deterministic: no I/O, no clock reads (``today`` is passed in),
identical inputs give identical outputs. Inputs must already satisfy the
UserBiometrics invariants; callers validate first.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, cast

from ..core.value_objects.activity_level import ActivityLevel
from ..core.value_objects.computed_targets import ComputedTargets
from ..core.value_objects.goal import Goal
from ..core.value_objects.projection import Projection
from ..core.value_objects.sex import Sex
from ..core.value_objects.user_biometrics import UserBiometrics

WATER_ML_PER_KG = 35


@dataclass(frozen=True)
class TargetComputation:
    """Result of a full calculation pass."""

    targets: ComputedTargets
    projection: Optional[Projection]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (1501.5 -> 1502)."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class TargetCalculator:
    """Compute BMR, TDEE and daily targets from biometrics.

    BMR uses the Mifflin-St Jeor equation:
        BMR = 10 × weight(kg) + 6.25 × height(cm) - 5 × age + offset
        offset: +5 male, -161 female, -78 other

    References:
        Mifflin MD, St Jeor ST, Hill LA, et al. A new predictive equation
        for resting energy expenditure in healthy individuals.
        Am J Clin Nutr. 1990;51(2):241-247.
    """

    def bmr(self, weight: float, height: float, age: int, sex: Sex) -> int:
        """Basal metabolic rate in kcal/day.

        Example:
            >>> TargetCalculator().bmr(80.0, 180.0, 30, Sex.MALE)
            1780
        """
        base = 10 * weight + 6.25 * height - 5 * age
        return round_half_up(base + sex.bmr_offset())

    def tdee(self, bmr: int, activity_level: ActivityLevel) -> int:
        """Total daily energy expenditure: BMR × PAL multiplier.

        Example:
            >>> TargetCalculator().tdee(1780, ActivityLevel.MODERATELY_ACTIVE)
            2759
        """
        return round_half_up(bmr * activity_level.pal_multiplier())

    def calorie_target(self, tdee: int, goal: Goal) -> int:
        """TDEE shifted by the goal's fixed deficit or surplus."""
        return tdee + goal.calorie_offset()

    def protein_target_grams(self, weight: float, goal: Goal) -> int:
        """Daily protein in grams from the goal's g/kg factor."""
        return round_half_up(weight * goal.protein_multiplier())

    def water_target_ml(self, weight: float) -> int:
        """Daily water in ml at 35 ml per kg."""
        return round_half_up(weight * WATER_ML_PER_KG)

    def weekly_rate(self, goal: Goal) -> float:
        """Expected kg/week change; negative for loss, 0 for maintenance goals."""
        return goal.weekly_rate()

    def projection(
        self,
        start_weight: float,
        target_weight: float,
        weekly_rate: float,
        today: date,
    ) -> Optional[Projection]:
        """Timeline to reach ``target_weight`` at ``weekly_rate``.

        Returns:
            Optional[Projection]: None when the rate is zero or the target
                equals the start weight
        """
        if weekly_rate == 0 or target_weight == start_weight:
            return None

        # Decimal keeps e.g. 1.1 / 0.1 from ceiling to 12.
        difference = Decimal(repr(round(abs(target_weight - start_weight), 3)))
        rate = Decimal(repr(abs(weekly_rate)))
        estimated_weeks = math.ceil(difference / rate)

        return Projection(
            estimated_weeks=estimated_weeks,
            projected_date=today + timedelta(weeks=estimated_weeks),
            start_weight=start_weight,
            target_weight=target_weight,
        )

    def compute(self, biometrics: UserBiometrics, today: date) -> TargetComputation:
        """Run every formula for a validated biometrics record.

        Args:
            biometrics: Computable record (see UserBiometrics.is_computable)
            today: Reference date for the projection

        Returns:
            TargetComputation: Targets plus optional projection
        """
        if not biometrics.is_computable():
            raise ValueError(f"Biometrics not computable: {', '.join(biometrics.validation_errors())}")

        weight = cast(float, biometrics.weight)
        goal = cast(Goal, biometrics.goal)
        bmr = self.bmr(
            weight, cast(float, biometrics.height), cast(int, biometrics.age), cast(Sex, biometrics.sex)
        )
        tdee = self.tdee(bmr, cast(ActivityLevel, biometrics.activity_level))
        weekly_rate = self.weekly_rate(goal)

        targets = ComputedTargets(
            bmr=bmr,
            tdee=tdee,
            calorie_target=self.calorie_target(tdee, goal),
            protein_target_grams=self.protein_target_grams(weight, goal),
            water_target_ml=self.water_target_ml(weight),
            weekly_rate_kg_per_week=weekly_rate,
        )

        projection = None
        if biometrics.target_weight is not None:
            projection = self.projection(
                weight, biometrics.target_weight, weekly_rate, today
            )

        return TargetComputation(targets=targets, projection=projection)

    @staticmethod
    def age_on(date_of_birth: date, today: date) -> int:
        """Completed years between ``date_of_birth`` and ``today``.

        Example:
            >>> TargetCalculator.age_on(date(1990, 6, 15), date(2024, 6, 14))
            33
        """
        had_birthday = (today.month, today.day) >= (date_of_birth.month, date_of_birth.day)
        return today.year - date_of_birth.year - (0 if had_birthday else 1)
