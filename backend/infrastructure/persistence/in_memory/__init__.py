"""In-memory persistence adapters."""

from .plan_store import InMemoryPlanStore
from .profile_provider import InMemoryProfileProvider

__all__ = ["InMemoryPlanStore", "InMemoryProfileProvider"]
