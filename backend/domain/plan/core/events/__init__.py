"""Domain events for the plan domain."""

from .base import DomainEvent
from .biometrics_updated import BiometricsUpdated
from .plan_generated import PlanGenerated

__all__ = ["DomainEvent", "BiometricsUpdated", "PlanGenerated"]
