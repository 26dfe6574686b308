"""Entities for the plan domain."""

from .plan_snapshot import PlanSnapshot

__all__ = ["PlanSnapshot"]
