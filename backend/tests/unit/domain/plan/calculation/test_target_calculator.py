"""Unit tests for TargetCalculator.

Tests focus on:
- Mifflin-St Jeor BMR per sex
- TDEE multipliers and half-up rounding
- Goal-driven calorie, protein and rate constants
- Projection timeline and its absent cases
- Age derivation from date of birth
"""

from datetime import date, timedelta

import pytest

from domain.plan.calculation.target_calculator import (
    TargetCalculator,
    round_half_up,
)
from domain.plan.core.value_objects.activity_level import ActivityLevel
from domain.plan.core.value_objects.goal import Goal
from domain.plan.core.value_objects.sex import Sex

TODAY = date(2025, 1, 6)


@pytest.fixture
def calculator() -> TargetCalculator:
    return TargetCalculator()


class TestRoundHalfUp:
    """Rounding matches the integer results users were shown historically."""

    @pytest.mark.parametrize(
        "value, expected",
        [(1501.5, 1502), (2.5, 3), (1452.49, 1452), (1699.5, 1700), (130.4, 130), (0.0, 0)],
    )
    def test_rounds_halves_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestBMR:
    """Test basal metabolic rate."""

    def test_male(self, calculator: TargetCalculator) -> None:
        """10×80 + 6.25×180 - 5×30 + 5 = 1780."""
        assert calculator.bmr(80.0, 180.0, 30, Sex.MALE) == 1780

    def test_female(self, calculator: TargetCalculator) -> None:
        """10×75 + 6.25×170 - 5×30 - 161 = 1501.5, rounded to 1502."""
        assert calculator.bmr(75.0, 170.0, 30, Sex.FEMALE) == 1502

    def test_other_uses_midpoint_offset(self, calculator: TargetCalculator) -> None:
        """10×70 + 6.25×165 - 5×40 - 78 = 1453.25."""
        assert calculator.bmr(70.0, 165.0, 40, Sex.OTHER) == 1453

    def test_male_female_gap_is_166(self, calculator: TargetCalculator) -> None:
        male = calculator.bmr(80.0, 180.0, 30, Sex.MALE)
        female = calculator.bmr(80.0, 180.0, 30, Sex.FEMALE)
        assert male - female == 166


class TestTDEE:
    """Test total daily energy expenditure."""

    @pytest.mark.parametrize(
        "level, expected",
        [
            (ActivityLevel.SEDENTARY, 2160),
            (ActivityLevel.LIGHTLY_ACTIVE, 2475),
            (ActivityLevel.MODERATELY_ACTIVE, 2790),
            (ActivityLevel.VERY_ACTIVE, 3105),
            (ActivityLevel.EXTREMELY_ACTIVE, 3420),
        ],
    )
    def test_multipliers(
        self, calculator: TargetCalculator, level: ActivityLevel, expected: int
    ) -> None:
        assert calculator.tdee(1800, level) == expected

    def test_half_rounds_up(self, calculator: TargetCalculator) -> None:
        """1236 × 1.375 = 1699.5."""
        assert calculator.tdee(1236, ActivityLevel.LIGHTLY_ACTIVE) == 1700


class TestGoalTargets:
    """Test calorie, protein, water and rate targets."""

    @pytest.mark.parametrize(
        "goal, expected",
        [
            (Goal.LOSE_WEIGHT, 1500),
            (Goal.GAIN_MUSCLE, 2400),
            (Goal.MAINTAIN, 2000),
            (Goal.IMPROVE_HEALTH, 2000),
        ],
    )
    def test_calorie_target(self, calculator: TargetCalculator, goal: Goal, expected: int) -> None:
        assert calculator.calorie_target(2000, goal) == expected

    @pytest.mark.parametrize(
        "goal, expected",
        [
            (Goal.LOSE_WEIGHT, 176),
            (Goal.GAIN_MUSCLE, 192),
            (Goal.MAINTAIN, 144),
            (Goal.IMPROVE_HEALTH, 144),
        ],
    )
    def test_protein_target(self, calculator: TargetCalculator, goal: Goal, expected: int) -> None:
        assert calculator.protein_target_grams(80.0, goal) == expected

    def test_water_target(self, calculator: TargetCalculator) -> None:
        assert calculator.water_target_ml(75.0) == 2625
        assert calculator.water_target_ml(80.0) == 2800

    @pytest.mark.parametrize(
        "goal, expected",
        [
            (Goal.LOSE_WEIGHT, -0.5),
            (Goal.GAIN_MUSCLE, 0.4),
            (Goal.MAINTAIN, 0.0),
            (Goal.IMPROVE_HEALTH, 0.0),
        ],
    )
    def test_weekly_rate(self, calculator: TargetCalculator, goal: Goal, expected: float) -> None:
        assert calculator.weekly_rate(goal) == expected


class TestProjection:
    """Test timeline to target weight."""

    def test_ten_kg_loss_takes_twenty_weeks(self, calculator: TargetCalculator) -> None:
        projection = calculator.projection(75.0, 65.0, -0.5, TODAY)

        assert projection is not None
        assert projection.estimated_weeks == 20
        assert projection.projected_date == TODAY + timedelta(days=140)
        assert projection.start_weight == 75.0
        assert projection.target_weight == 65.0

    def test_partial_week_rounds_up(self, calculator: TargetCalculator) -> None:
        """5 kg at 0.4 kg/week = 12.5 weeks."""
        projection = calculator.projection(70.0, 75.0, 0.4, TODAY)

        assert projection is not None
        assert projection.estimated_weeks == 13

    def test_float_noise_does_not_add_a_week(self, calculator: TargetCalculator) -> None:
        """71.2 - 70.0 is not exactly 1.2 in binary floating point."""
        projection = calculator.projection(71.2, 70.0, -0.4, TODAY)

        assert projection is not None
        assert projection.estimated_weeks == 3

    def test_zero_rate_has_no_projection(self, calculator: TargetCalculator) -> None:
        assert calculator.projection(75.0, 65.0, 0.0, TODAY) is None

    def test_target_equal_to_start_has_no_projection(self, calculator: TargetCalculator) -> None:
        assert calculator.projection(75.0, 75.0, -0.5, TODAY) is None


class TestCompute:
    """Test the full calculation pass."""

    def test_reference_profile(self, calculator: TargetCalculator, sample_biometrics) -> None:
        """75 kg, 170 cm, 30 y/o woman, moderately active, losing weight."""
        result = calculator.compute(sample_biometrics, TODAY)
        targets = result.targets

        assert targets.bmr == 1502
        assert targets.tdee == 2328
        assert targets.calorie_target == 1828
        assert targets.protein_target_grams == 165
        assert targets.water_target_ml == 2625
        assert targets.weekly_rate_kg_per_week == -0.5
        assert result.projection is None

    def test_projection_from_target_weight(self, calculator: TargetCalculator, make_biometrics) -> None:
        result = calculator.compute(make_biometrics(target_weight=65.0), TODAY)

        assert result.projection is not None
        assert result.projection.estimated_weeks == 20
        assert result.projection.projected_date == date(2025, 5, 26)

    def test_maintain_goal_has_no_projection(self, calculator: TargetCalculator, make_biometrics) -> None:
        result = calculator.compute(make_biometrics(goal=Goal.MAINTAIN, target_weight=65.0), TODAY)

        assert result.projection is None

    def test_is_deterministic(self, calculator: TargetCalculator, make_biometrics) -> None:
        biometrics = make_biometrics(target_weight=68.0)

        assert calculator.compute(biometrics, TODAY) == calculator.compute(biometrics, TODAY)

    def test_incomplete_biometrics_rejected(self, calculator: TargetCalculator, make_biometrics) -> None:
        with pytest.raises(ValueError, match="sex: missing"):
            calculator.compute(make_biometrics(sex=None), TODAY)

    @pytest.mark.parametrize("goal", list(Goal))
    @pytest.mark.parametrize("level", list(ActivityLevel))
    def test_invariants_hold_for_every_goal_and_level(
        self, calculator: TargetCalculator, make_biometrics, goal: Goal, level: ActivityLevel
    ) -> None:
        targets = calculator.compute(make_biometrics(goal=goal, activity_level=level), TODAY).targets

        assert targets.tdee >= targets.bmr
        assert targets.calorie_target - targets.tdee == goal.calorie_offset()


class TestAgeOn:
    """Test age derivation."""

    def test_day_before_birthday(self) -> None:
        assert TargetCalculator.age_on(date(1990, 6, 15), date(2024, 6, 14)) == 33

    def test_on_birthday(self) -> None:
        assert TargetCalculator.age_on(date(1990, 6, 15), date(2024, 6, 15)) == 34

    def test_leap_day_birthday(self) -> None:
        assert TargetCalculator.age_on(date(2000, 2, 29), date(2023, 2, 28)) == 22
        assert TargetCalculator.age_on(date(2000, 2, 29), date(2023, 3, 1)) == 23
