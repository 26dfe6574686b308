"""ExplanationService - builds the "why it works" content for a plan."""

from typing import Optional

from ..core.value_objects.computed_targets import ComputedTargets
from ..core.value_objects.goal import Goal
from ..core.value_objects.projection import Projection
from ..core.value_objects.user_biometrics import UserBiometrics
from ..core.value_objects.why_it_works import ExplanationSection, WhyItWorks
from .target_calculator import WATER_ML_PER_KG

BMR_FORMULA = "BMR = (10 × weight in kg) + (6.25 × height in cm) - (5 × age) + sex offset"
TDEE_FORMULA = "TDEE = BMR × activity multiplier"
CALORIE_FORMULA = "Calorie target = TDEE + goal adjustment"
PROTEIN_FORMULA = "Protein (g) = weight in kg × grams per kg"
WATER_FORMULA = "Water (ml) = weight in kg × 35"
TIMELINE_FORMULA = "Weeks = ceil(|target weight - current weight| / |weekly rate|)"

_PROTEIN_REASONS = {
    Goal.LOSE_WEIGHT: (
        "In a calorie deficit, a high protein intake protects lean mass "
        "and keeps hunger in check."
    ),
    Goal.GAIN_MUSCLE: (
        "Building muscle needs a steady supply of amino acids for muscle "
        "protein synthesis and recovery."
    ),
}
_DEFAULT_PROTEIN_REASON = (
    "Adequate protein maintains muscle, supports satiety and keeps your "
    "metabolism working well."
)


class ExplanationService:
    """Turn computed targets into structured educational text.

    The output is informational only; no calculation reads it back.
    """

    def build(
        self,
        targets: ComputedTargets,
        projection: Optional[Projection],
        biometrics: UserBiometrics,
    ) -> WhyItWorks:
        """Explain every target of a plan.

        Args:
            targets: Targets computed for the user
            projection: Timeline, if one was computed
            biometrics: Validated inputs the targets came from

        Returns:
            WhyItWorks: One section per target
        """
        if biometrics.goal is None or biometrics.activity_level is None:
            raise ValueError("Explanation needs both goal and activity_level")
        goal = biometrics.goal
        activity_level = biometrics.activity_level
        multiplier = activity_level.pal_multiplier()
        grams_per_kg = goal.protein_multiplier()
        offset = targets.calorie_offset

        return WhyItWorks(
            bmr=ExplanationSection(
                title="Your Basal Metabolic Rate (BMR)",
                explanation=(
                    f"Your BMR is {targets.bmr} calories: the energy your body uses "
                    "at complete rest for breathing, circulation and cell repair. "
                    "It is estimated with the Mifflin-St Jeor equation."
                ),
                formula=BMR_FORMULA,
                coefficients={"sex_offset": biometrics.sex.bmr_offset() if biometrics.sex else 0.0},
            ),
            tdee=ExplanationSection(
                title="Your Total Daily Energy Expenditure (TDEE)",
                explanation=(
                    f"Your TDEE is {targets.tdee} calories, your BMR multiplied by "
                    f"{multiplier} for a {activity_level.label()} lifestyle. "
                    "Eating this amount keeps your weight stable."
                ),
                formula=TDEE_FORMULA,
                coefficients={"activity_multiplier": multiplier},
            ),
            calorie_target=ExplanationSection(
                title="Your Daily Calorie Target",
                explanation=self._calorie_text(targets, goal),
                formula=CALORIE_FORMULA,
                coefficients={"adjustment": float(offset)},
            ),
            protein_target=ExplanationSection(
                title="Your Daily Protein Target",
                explanation=(
                    f"Aim for {targets.protein_target_grams}g of protein a day "
                    f"({grams_per_kg}g per kg of body weight). "
                    f"{_PROTEIN_REASONS.get(goal, _DEFAULT_PROTEIN_REASON)}"
                ),
                formula=PROTEIN_FORMULA,
                coefficients={"grams_per_kg": grams_per_kg},
            ),
            water_target=ExplanationSection(
                title="Your Daily Hydration Target",
                explanation=(
                    f"Drink about {targets.water_target_ml}ml of water a day "
                    f"({WATER_ML_PER_KG}ml per kg). Hydration supports recovery, "
                    "appetite regulation and energy levels."
                ),
                formula=WATER_FORMULA,
                coefficients={"ml_per_kg": float(WATER_ML_PER_KG)},
            ),
            timeline=ExplanationSection(
                title="Your Projected Timeline",
                explanation=self._timeline_text(targets, projection, goal),
                formula=TIMELINE_FORMULA if projection else None,
                coefficients={
                    "weekly_rate": targets.weekly_rate_kg_per_week,
                    "estimated_weeks": float(projection.estimated_weeks) if projection else 0.0,
                },
            ),
        )

    @staticmethod
    def _calorie_text(targets: ComputedTargets, goal: Goal) -> str:
        offset = targets.calorie_offset
        if offset < 0:
            return (
                f"To {goal.label()}, you eat {abs(offset)} calories below your TDEE. "
                f"That gap draws on stored fat at roughly "
                f"{abs(targets.weekly_rate_kg_per_week)} kg per week, a pace that "
                "preserves muscle."
            )
        if offset > 0:
            return (
                f"To {goal.label()}, you eat {offset} calories above your TDEE. "
                f"The surplus fuels muscle growth at roughly "
                f"{targets.weekly_rate_kg_per_week} kg per week alongside strength training."
            )
        return (
            f"To {goal.label()}, you eat at maintenance ({targets.calorie_target} "
            "calories) so your weight stays stable."
        )

    @staticmethod
    def _timeline_text(
        targets: ComputedTargets, projection: Optional[Projection], goal: Goal
    ) -> str:
        if projection is None and targets.weekly_rate_kg_per_week != 0:
            return (
                f"At {abs(targets.weekly_rate_kg_per_week)} kg per week you are on a "
                "steady pace. Add a target weight to see when you could reach it."
            )
        if projection is None:
            return (
                f"With a goal to {goal.label()} there is no weight timeline. "
                "Focus on consistent daily habits."
            )
        return (
            f"At {abs(targets.weekly_rate_kg_per_week)} kg per week you should reach "
            f"{projection.target_weight} kg in about {projection.estimated_weeks} weeks "
            f"(around {projection.projected_date.isoformat()}). Progress is rarely "
            "linear, so expect some week-to-week fluctuation."
        )
