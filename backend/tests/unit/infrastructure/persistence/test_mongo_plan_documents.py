"""Unit tests for the MongoDB adapters without a database.

Document mapping is exercised directly; driver calls are mocked to
check error wrapping.
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from freezegun import freeze_time
from pymongo.errors import PyMongoError

from domain.plan.core.exceptions.domain_errors import PersistenceError
from domain.plan.core.value_objects.activity_level import ActivityLevel
from domain.plan.core.value_objects.goal import Goal
from domain.plan.core.value_objects.plan_status import PlanStatus
from domain.plan.core.value_objects.sex import Sex
from infrastructure.persistence.mongodb.base import MongoWritableRepository
from infrastructure.persistence.mongodb.plan_store import MongoPlanStore
from infrastructure.persistence.mongodb.profile_provider import MongoProfileProvider


@pytest.fixture
def mock_client() -> MagicMock:
    """Mock Motor client; ``client[db][collection]`` yields a MagicMock."""
    return MagicMock()


@pytest.fixture
def mongo_store(mock_client: MagicMock) -> MongoPlanStore:
    return MongoPlanStore(mock_client)


class TestPlanDocuments:
    """Test PlanSnapshot <-> document mapping."""

    def test_round_trip(self, mongo_store: MongoPlanStore, make_snapshot, make_biometrics) -> None:
        snapshot = make_snapshot(biometrics=make_biometrics(target_weight=65.0))

        doc = mongo_store.to_document(snapshot)
        restored = mongo_store.from_document(doc)

        assert restored == snapshot
        assert doc["_id"] == str(snapshot.plan_id)
        assert doc["status"] == "active"
        assert doc["projection"]["estimated_weeks"] == 20

    def test_superseded_round_trip(self, mongo_store: MongoPlanStore, make_snapshot) -> None:
        superseded = make_snapshot().superseded(at=datetime(2025, 1, 13, tzinfo=timezone.utc))

        restored = mongo_store.from_document(mongo_store.to_document(superseded))

        assert restored.status is PlanStatus.SUPERSEDED
        assert restored.superseded_at == datetime(2025, 1, 13, tzinfo=timezone.utc)

    def test_collection_name(self, mongo_store: MongoPlanStore) -> None:
        assert mongo_store.collection_name == "plan_snapshots"


class TestPlanStoreErrors:
    """Driver failures surface as PersistenceError."""

    @pytest.mark.asyncio
    async def test_get_active_wraps_driver_error(self, mongo_store: MongoPlanStore) -> None:
        mongo_store.collection.find_one = AsyncMock(side_effect=PyMongoError("connection reset"))

        with pytest.raises(PersistenceError) as exc_info:
            await mongo_store.get_active("user123")

        assert exc_info.value.user_id == "user123"

    @pytest.mark.asyncio
    async def test_replace_active_wraps_session_error(
        self, mongo_store: MongoPlanStore, mock_client: MagicMock, make_snapshot
    ) -> None:
        mock_client.start_session = AsyncMock(side_effect=PyMongoError("no replica set"))

        with pytest.raises(PersistenceError, match="replace_active"):
            await mongo_store.replace_active(make_snapshot())

    @pytest.mark.asyncio
    async def test_get_active_maps_document(
        self, mongo_store: MongoPlanStore, make_snapshot
    ) -> None:
        snapshot = make_snapshot()
        mongo_store.collection.find_one = AsyncMock(
            return_value=mongo_store.to_document(snapshot)
        )

        assert await mongo_store.get_active("user123") == snapshot
        filter_dict = mongo_store.collection.find_one.call_args.args[0]
        assert filter_dict == {"user_id": "user123", "status": "active"}


class TestProfileDocuments:
    """Test user_settings -> UserBiometrics mapping."""

    @freeze_time("2025-01-06")
    def test_maps_settings_document(self, mock_client: MagicMock) -> None:
        provider = MongoProfileProvider(mock_client)

        biometrics = provider.from_document(
            {
                "user_id": "user123",
                "current_weight": "75",
                "height": 170,
                "date_of_birth": datetime(1994, 6, 15),
                "gender": "female",
                "primary_goal": "lose_weight",
                "activity_level": "moderately_active",
                "target_weight": 65,
                "target_date": "2025-06-01T00:00:00Z",
            }
        )

        assert biometrics.weight == 75.0
        assert biometrics.age == 30
        assert biometrics.sex is Sex.FEMALE
        assert biometrics.goal is Goal.LOSE_WEIGHT
        assert biometrics.activity_level is ActivityLevel.MODERATELY_ACTIVE
        assert biometrics.target_date == date(2025, 6, 1)
        assert biometrics.is_computable()

    def test_unknown_values_become_missing(self, mock_client: MagicMock) -> None:
        provider = MongoProfileProvider(mock_client)

        biometrics = provider.from_document(
            {"user_id": "user123", "gender": "robot", "primary_goal": "", "current_weight": "n/a"}
        )

        assert biometrics.sex is None
        assert biometrics.goal is None
        assert biometrics.weight is None
        assert biometrics.age is None
        assert "sex: missing" in biometrics.validation_errors()

    def test_profile_adapter_is_read_only(self, mock_client: MagicMock, mongo_store: MongoPlanStore) -> None:
        provider = MongoProfileProvider(mock_client)

        assert not isinstance(provider, MongoWritableRepository)
        assert not hasattr(provider, "to_document")
        assert isinstance(mongo_store, MongoWritableRepository)
