"""Value objects for the plan domain."""

from .activity_level import ActivityLevel
from .computed_targets import ComputedTargets
from .goal import Goal
from .plan_id import PlanId
from .plan_status import PlanStatus
from .projection import Projection
from .sex import Sex
from .user_biometrics import UserBiometrics
from .why_it_works import ExplanationSection, WhyItWorks

__all__ = [
    "ActivityLevel",
    "ComputedTargets",
    "ExplanationSection",
    "Goal",
    "PlanId",
    "PlanStatus",
    "Projection",
    "Sex",
    "UserBiometrics",
    "WhyItWorks",
]
