"""Cache implementations."""

from infrastructure.cache.in_memory_plan_cache import (
    DEFAULT_PLAN_TTL,
    InMemoryPlanCache,
    PlanCacheEntry,
)

__all__ = [
    "DEFAULT_PLAN_TTL",
    "InMemoryPlanCache",
    "PlanCacheEntry",
]
