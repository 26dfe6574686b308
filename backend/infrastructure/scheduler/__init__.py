"""
Scheduler infrastructure for background jobs.
"""

from .recompute_job import (
    JobState,
    RecomputeJob,
    RecomputeSummary,
    UserRecomputeUpdate,
)
from .scheduler_config import SchedulerManager

__all__ = [
    "JobState",
    "RecomputeJob",
    "RecomputeSummary",
    "SchedulerManager",
    "UserRecomputeUpdate",
]
