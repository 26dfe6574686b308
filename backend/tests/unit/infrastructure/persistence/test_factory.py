"""Unit tests for persistence factory.

Tests environment-based backend selection with graceful fallback.
"""

import pytest

from infrastructure.config import Settings
from infrastructure.persistence.factory import create_persistence
from infrastructure.persistence.in_memory.plan_store import InMemoryPlanStore
from infrastructure.persistence.in_memory.profile_provider import InMemoryProfileProvider


class TestCreatePersistence:
    """Test create_persistence() factory function."""

    def test_inmemory_selection(self) -> None:
        store, profiles = create_persistence(Settings(repository_backend="inmemory"))

        assert isinstance(store, InMemoryPlanStore)
        assert isinstance(profiles, InMemoryProfileProvider)

    def test_unknown_backend_falls_back_to_inmemory(self) -> None:
        store, _ = create_persistence(Settings(repository_backend="cassandra"))

        assert isinstance(store, InMemoryPlanStore)

    def test_mongodb_creates_mongo_adapters(self, monkeypatch) -> None:
        from infrastructure.persistence.mongodb.plan_store import MongoPlanStore
        from infrastructure.persistence.mongodb.profile_provider import MongoProfileProvider

        monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017")

        store, profiles = create_persistence(Settings(repository_backend="mongodb"))

        assert isinstance(store, MongoPlanStore)
        assert isinstance(profiles, MongoProfileProvider)

    def test_mongodb_without_uri_raises_error(self, monkeypatch) -> None:
        monkeypatch.delenv("MONGODB_URI", raising=False)

        with pytest.raises(ValueError, match="MONGODB_URI not set"):
            create_persistence(Settings(repository_backend="mongodb"))
