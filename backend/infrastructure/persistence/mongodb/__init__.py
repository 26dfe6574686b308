"""MongoDB persistence adapters."""

from .base import MongoBaseRepository, MongoWritableRepository
from .plan_store import MongoPlanStore
from .profile_provider import MongoProfileProvider

__all__ = [
    "MongoBaseRepository",
    "MongoPlanStore",
    "MongoProfileProvider",
    "MongoWritableRepository",
]
