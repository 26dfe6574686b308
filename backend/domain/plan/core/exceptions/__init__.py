"""Domain exceptions for plan generation."""

from .domain_errors import (
    CacheUnavailableError,
    IncompleteProfileError,
    PerUserBatchFailure,
    PersistenceError,
    PlanDomainError,
)

__all__ = [
    "PlanDomainError",
    "IncompleteProfileError",
    "PersistenceError",
    "CacheUnavailableError",
    "PerUserBatchFailure",
]
