"""Plan application services."""

from .plan_generation_service import (
    GeneratePlanResult,
    PlanGenerationService,
    PlanSource,
)

__all__ = ["GeneratePlanResult", "PlanGenerationService", "PlanSource"]
