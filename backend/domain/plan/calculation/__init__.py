"""Calculation services for plan targets."""

from .explanation_service import ExplanationService
from .target_calculator import TargetCalculator, TargetComputation, round_half_up

__all__ = [
    "ExplanationService",
    "TargetCalculator",
    "TargetComputation",
    "round_half_up",
]
