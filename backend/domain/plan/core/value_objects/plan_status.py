"""PlanStatus value object."""

from enum import Enum


class PlanStatus(str, Enum):
    """Lifecycle status of a plan snapshot.

    Exactly one ACTIVE plan exists per user; every successful recompute
    flips the previous one to SUPERSEDED.
    """

    ACTIVE = "active"
    SUPERSEDED = "superseded"
