"""Goal value object - user's primary objective."""

from enum import Enum


class Goal(str, Enum):
    """User's primary goal, driving calorie, protein and rate constants.

    - LOSE_WEIGHT: ~500 kcal/day deficit, about 0.5 kg/week loss
    - GAIN_MUSCLE: ~400 kcal/day surplus, about 0.4 kg/week gain
    - MAINTAIN: eat at TDEE
    - IMPROVE_HEALTH: eat at TDEE
    """

    LOSE_WEIGHT = "lose_weight"
    GAIN_MUSCLE = "gain_muscle"
    MAINTAIN = "maintain"
    IMPROVE_HEALTH = "improve_health"

    def calorie_offset(self) -> int:
        """Signed kcal/day applied to TDEE.

        Example:
            >>> Goal.LOSE_WEIGHT.calorie_offset()
            -500
        """
        offsets = {
            Goal.LOSE_WEIGHT: -500,
            Goal.GAIN_MUSCLE: +400,
            Goal.MAINTAIN: 0,
            Goal.IMPROVE_HEALTH: 0,
        }
        return offsets[self]

    def protein_multiplier(self) -> float:
        """Get protein requirement multiplier (g/kg body weight).

        Example:
            >>> Goal.GAIN_MUSCLE.protein_multiplier()
            2.4
        """
        multipliers = {
            Goal.LOSE_WEIGHT: 2.2,  # preserve muscle in a deficit
            Goal.GAIN_MUSCLE: 2.4,  # support muscle protein synthesis
            Goal.MAINTAIN: 1.8,
            Goal.IMPROVE_HEALTH: 1.8,
        }
        return multipliers[self]

    def weekly_rate(self) -> float:
        """Expected signed weight change in kg/week (negative = loss)."""
        rates = {
            Goal.LOSE_WEIGHT: -0.5,
            Goal.GAIN_MUSCLE: 0.4,
            Goal.MAINTAIN: 0.0,
            Goal.IMPROVE_HEALTH: 0.0,
        }
        return rates[self]

    def label(self) -> str:
        """Human-readable label, e.g. ``"lose weight"``."""
        return self.value.replace("_", " ")
