"""REST API endpoints for plan generation.

Maps domain errors to HTTP statuses: an incomplete profile is a 422 the
client must fix, a persistence failure is a 503 worth retrying.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from application.plan.services.plan_generation_service import (
    GeneratePlanResult,
    PlanGenerationService,
)
from domain.plan.core.exceptions.domain_errors import (
    IncompleteProfileError,
    PersistenceError,
)
from domain.plan.core.value_objects.computed_targets import ComputedTargets
from infrastructure.scheduler.recompute_job import RecomputeJob

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/plans", tags=["plans"])


class GeneratePlanRequest(BaseModel):
    """Request body for plan generation."""

    user_id: str = Field(..., min_length=1)
    force_recompute: bool = False


class TargetsResponse(BaseModel):
    bmr: int
    tdee: int
    calorie_target: int
    protein_target_grams: int
    water_target_ml: int
    weekly_rate_kg_per_week: float


class ProjectionResponse(BaseModel):
    estimated_weeks: int
    projected_date: date
    start_weight: float
    target_weight: float


class ExplanationSectionResponse(BaseModel):
    title: str
    explanation: str
    formula: Optional[str] = None
    coefficients: Dict[str, float] = Field(default_factory=dict)


class PlanResponse(BaseModel):
    """Response model for a generated plan."""

    plan_id: str
    user_id: str
    created_at: datetime
    status: str
    recomputed: bool
    source: str
    targets: TargetsResponse
    projection: Optional[ProjectionResponse] = None
    why_it_works: Dict[str, ExplanationSectionResponse]
    previous_targets: Optional[TargetsResponse] = None


class ErrorResponse(BaseModel):
    """Response model for plan errors."""

    error: str
    detail: Optional[str] = None


def get_plan_service(request: Request) -> PlanGenerationService:
    """Plan service wired by the application lifespan.

    Raises:
        RuntimeError: If the application has not been started
    """
    service = getattr(request.app.state, "plan_service", None)
    if service is None:
        raise RuntimeError("Plan service not initialized")
    return service


@retry(
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    retry=retry_if_exception_type(PersistenceError),
    reraise=True,
)
async def _generate_with_retry(
    service: PlanGenerationService, user_id: str, force_recompute: bool
) -> GeneratePlanResult:
    return await service.generate_plan(user_id, force_recompute=force_recompute)


def _targets_response(targets: Optional[ComputedTargets]) -> Optional[TargetsResponse]:
    if targets is None:
        return None
    return TargetsResponse(**targets.to_dict())


def to_plan_response(result: GeneratePlanResult) -> PlanResponse:
    snapshot = result.snapshot
    projection = snapshot.projection
    return PlanResponse(
        plan_id=str(snapshot.plan_id),
        user_id=snapshot.user_id,
        created_at=snapshot.created_at,
        status=snapshot.status.value,
        recomputed=result.recomputed,
        source=result.source.value,
        targets=TargetsResponse(**snapshot.targets.to_dict()),
        projection=ProjectionResponse(
            estimated_weeks=projection.estimated_weeks,
            projected_date=projection.projected_date,
            start_weight=projection.start_weight,
            target_weight=projection.target_weight,
        )
        if projection is not None
        else None,
        why_it_works={
            name: ExplanationSectionResponse(**section)
            for name, section in snapshot.why_it_works.to_dict().items()
        },
        previous_targets=_targets_response(result.previous_targets),
    )


@router.post(
    "/generate",
    response_model=PlanResponse,
    responses={422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def generate_plan(
    body: GeneratePlanRequest,
    service: PlanGenerationService = Depends(get_plan_service),
) -> PlanResponse:
    """Generate (or fetch) the plan for a user.

    Raises:
        HTTPException: 422 if the profile is incomplete, 503 if the
            plan could not be saved after one retry
    """
    try:
        result = await _generate_with_retry(service, body.user_id, body.force_recompute)
    except IncompleteProfileError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": e.kind, "detail": "; ".join(e.problems) or "profile not found"},
        ) from e
    except PersistenceError as e:
        logger.error("api.plan_persistence_failed", user_id=body.user_id)
        raise HTTPException(
            status_code=503,
            detail={"error": e.kind, "detail": "Plan storage unavailable, retry later"},
        ) from e

    return to_plan_response(result)


def get_recompute_job(request: Request) -> RecomputeJob:
    job = getattr(request.app.state, "recompute_job", None)
    if job is None:
        raise RuntimeError("Recompute job not initialized")
    return job


@router.post("/recompute", responses={409: {"model": ErrorResponse}})
async def recompute_all(job: RecomputeJob = Depends(get_recompute_job)) -> Dict[str, Any]:
    """Run the weekly recompute immediately and return its summary."""
    if job.is_running:
        raise HTTPException(
            status_code=409,
            detail={"error": "recompute_running", "detail": "A recompute is already in progress"},
        )
    summary = await job.run()
    return summary.to_dict()
