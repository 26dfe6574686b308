"""Persistence factory for the plan store and profile provider.

Environment-based selection with in-memory as the safe default:
- .env (runtime): REPOSITORY_BACKEND=mongodb (production persistence)
- .env.test (pytest): REPOSITORY_BACKEND=inmemory (fast, isolated tests)

Usage:
    from infrastructure.persistence.factory import create_persistence

    plan_store, profile_provider = create_persistence()
"""

from typing import Any, Dict, Optional, Tuple

import structlog
from motor.motor_asyncio import AsyncIOMotorClient

from domain.plan.core.ports.plan_store import IPlanStore
from domain.plan.core.ports.profile_provider import IProfileProvider
from infrastructure.config import Settings, get_mongodb_uri, get_settings
from infrastructure.persistence.in_memory.plan_store import InMemoryPlanStore
from infrastructure.persistence.in_memory.profile_provider import InMemoryProfileProvider
from infrastructure.persistence.mongodb.plan_store import MongoPlanStore
from infrastructure.persistence.mongodb.profile_provider import MongoProfileProvider

logger = structlog.get_logger(__name__)


def create_persistence(
    settings: Optional[Settings] = None,
    client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None,
) -> Tuple[IPlanStore, IProfileProvider]:
    """Create plan store and profile provider for the configured backend.

    Args:
        settings: Settings to read REPOSITORY_BACKEND from (defaults to env)
        client: Motor client to share (mongodb backend only)

    Returns:
        Tuple of (plan store, profile provider)

    Raises:
        ValueError: If mongodb is selected but MONGODB_URI is not set
    """
    settings = settings or get_settings()
    backend = settings.repository_backend

    if backend == "mongodb":
        if client is None:
            uri = get_mongodb_uri()
            if not uri:
                raise ValueError(
                    "REPOSITORY_BACKEND=mongodb but MONGODB_URI not set. "
                    "Set MONGODB_URI in .env or use REPOSITORY_BACKEND=inmemory"
                )
            client = AsyncIOMotorClient(uri)

        logger.info("persistence.selected", backend="mongodb")
        return MongoPlanStore(client), MongoProfileProvider(client)

    if backend != "inmemory":
        logger.warning("persistence.unknown_backend", backend=backend, fallback="inmemory")

    logger.info("persistence.selected", backend="inmemory")
    return InMemoryPlanStore(), InMemoryProfileProvider()
