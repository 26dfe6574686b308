"""Shared test fixtures.

Loads ``.env.test`` when present so tests never pick up production
settings, then provides in-memory wiring of the plan pipeline.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
from dotenv import load_dotenv

from application.plan.services.plan_generation_service import PlanGenerationService
from domain.plan.calculation.explanation_service import ExplanationService
from domain.plan.calculation.target_calculator import TargetCalculator
from domain.plan.core.entities.plan_snapshot import PlanSnapshot
from domain.plan.core.value_objects.activity_level import ActivityLevel
from domain.plan.core.value_objects.goal import Goal
from domain.plan.core.value_objects.sex import Sex
from domain.plan.core.value_objects.user_biometrics import UserBiometrics
from infrastructure.cache.in_memory_plan_cache import InMemoryPlanCache
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.persistence.in_memory.plan_store import InMemoryPlanStore
from infrastructure.persistence.in_memory.profile_provider import InMemoryProfileProvider

env_test_path = Path(__file__).parent.parent / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=True)


def _biometrics(**overrides: Any) -> UserBiometrics:
    values: dict[str, Any] = {
        "weight": 75.0,
        "height": 170.0,
        "age": 30,
        "sex": Sex.FEMALE,
        "goal": Goal.LOSE_WEIGHT,
        "activity_level": ActivityLevel.MODERATELY_ACTIVE,
        "target_weight": None,
        "target_date": None,
    }
    values.update(overrides)
    return UserBiometrics(**values)


@pytest.fixture
def make_biometrics() -> Callable[..., UserBiometrics]:
    """Factory for biometrics; defaults to a 75 kg, 170 cm, 30 y/o woman losing weight."""
    return _biometrics


@pytest.fixture
def sample_biometrics() -> UserBiometrics:
    return _biometrics()


@pytest.fixture
def plan_store() -> InMemoryPlanStore:
    return InMemoryPlanStore()


@pytest.fixture
def profile_provider() -> InMemoryProfileProvider:
    return InMemoryProfileProvider()


@pytest.fixture
def plan_cache() -> InMemoryPlanCache:
    return InMemoryPlanCache()


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def plan_service(
    plan_store: InMemoryPlanStore,
    profile_provider: InMemoryProfileProvider,
    plan_cache: InMemoryPlanCache,
    event_bus: InMemoryEventBus,
) -> PlanGenerationService:
    """Plan service wired to in-memory store, profiles, cache and bus."""
    return PlanGenerationService(
        plan_store=plan_store,
        profile_provider=profile_provider,
        cache=plan_cache,
        event_bus=event_bus,
    )


@pytest.fixture
def make_snapshot() -> Callable[..., PlanSnapshot]:
    """Factory for active snapshots computed from real biometrics."""

    def _snapshot(
        user_id: str = "user123",
        biometrics: Optional[UserBiometrics] = None,
        created_at: Optional[datetime] = None,
    ) -> PlanSnapshot:
        biometrics = biometrics or _biometrics()
        created_at = created_at or datetime.now(timezone.utc)
        computation = TargetCalculator().compute(biometrics, created_at.date())
        return PlanSnapshot.create(
            user_id=user_id,
            targets=computation.targets,
            projection=computation.projection,
            why_it_works=ExplanationService().build(
                computation.targets, computation.projection, biometrics
            ),
            inputs_fingerprint=biometrics.fingerprint(),
            created_at=created_at,
        )

    return _snapshot
