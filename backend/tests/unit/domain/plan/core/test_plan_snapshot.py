"""Unit tests for PlanSnapshot and plan events."""

from datetime import datetime, timedelta, timezone

import pytest

from domain.plan.calculation.explanation_service import ExplanationService
from domain.plan.calculation.target_calculator import TargetCalculator
from domain.plan.core.entities.plan_snapshot import PlanSnapshot
from domain.plan.core.events.biometrics_updated import BiometricsUpdated
from domain.plan.core.events.plan_generated import PlanGenerated
from domain.plan.core.exceptions.domain_errors import (
    IncompleteProfileError,
    PerUserBatchFailure,
    PersistenceError,
    PlanDomainError,
)
from domain.plan.core.value_objects.plan_status import PlanStatus

CREATED_AT = datetime(2025, 1, 6, 2, 0, tzinfo=timezone.utc)


@pytest.fixture
def snapshot(sample_biometrics) -> PlanSnapshot:
    computation = TargetCalculator().compute(sample_biometrics, CREATED_AT.date())
    return PlanSnapshot.create(
        user_id="user123",
        targets=computation.targets,
        projection=computation.projection,
        why_it_works=ExplanationService().build(
            computation.targets, computation.projection, sample_biometrics
        ),
        inputs_fingerprint=sample_biometrics.fingerprint(),
        created_at=CREATED_AT,
    )


class TestPlanSnapshot:
    """Test snapshot invariants and status transition."""

    def test_create_is_active(self, snapshot: PlanSnapshot) -> None:
        assert snapshot.is_active
        assert snapshot.status is PlanStatus.ACTIVE
        assert snapshot.superseded_at is None

    def test_empty_user_rejected(self, snapshot: PlanSnapshot) -> None:
        with pytest.raises(PlanDomainError):
            PlanSnapshot.create(
                user_id="  ",
                targets=snapshot.targets,
                projection=None,
                why_it_works=snapshot.why_it_works,
                inputs_fingerprint="x",
            )

    def test_naive_timestamp_rejected(self, snapshot: PlanSnapshot) -> None:
        with pytest.raises(PlanDomainError, match="timezone-aware"):
            PlanSnapshot.create(
                user_id="user123",
                targets=snapshot.targets,
                projection=None,
                why_it_works=snapshot.why_it_works,
                inputs_fingerprint="x",
                created_at=datetime(2025, 1, 6),
            )

    def test_superseded_returns_copy(self, snapshot: PlanSnapshot) -> None:
        at = CREATED_AT + timedelta(days=7)
        superseded = snapshot.superseded(at=at)

        assert superseded.status is PlanStatus.SUPERSEDED
        assert superseded.superseded_at == at
        assert superseded.plan_id == snapshot.plan_id
        assert snapshot.is_active

    def test_cannot_supersede_twice(self, snapshot: PlanSnapshot) -> None:
        with pytest.raises(PlanDomainError, match="already superseded"):
            snapshot.superseded().superseded()

    def test_age_seconds(self, snapshot: PlanSnapshot) -> None:
        assert snapshot.age_seconds(CREATED_AT + timedelta(hours=1)) == 3600


class TestErrors:
    """Test error taxonomy."""

    def test_incomplete_profile_carries_problems(self) -> None:
        error = IncompleteProfileError("u1", ["weight: missing"])

        assert error.kind == "incomplete_profile"
        assert error.problems == ("weight: missing",)
        assert "weight: missing" in str(error)

    def test_batch_failure_kind(self) -> None:
        assert PerUserBatchFailure("u1", PersistenceError("down")).error_kind == "persistence_error"
        assert PerUserBatchFailure("u1", RuntimeError("boom")).error_kind == "unexpected"


class TestEvents:
    """Test plan domain events."""

    def test_biometrics_updated_affects_plan(self) -> None:
        assert BiometricsUpdated.create("u1", ["weight"]).affects_plan()
        assert BiometricsUpdated.create("u1", ["display_name", "goal"]).affects_plan()
        assert not BiometricsUpdated.create("u1", ["display_name"]).affects_plan()

    def test_plan_generated_create(self, snapshot: PlanSnapshot) -> None:
        event = PlanGenerated.create(snapshot.plan_id.value, "user123", None)

        assert event.user_id == "user123"
        assert event.previous_plan_id is None
        assert event.occurred_at.tzinfo is not None
