"""Ports (interfaces) for the plan domain."""

from .event_bus import IEventBus
from .plan_store import IPlanStore
from .profile_provider import IProfileProvider
from .result_cache import IPlanResultCache

__all__ = ["IEventBus", "IPlanStore", "IProfileProvider", "IPlanResultCache"]
