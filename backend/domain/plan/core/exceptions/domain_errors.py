"""Domain exceptions for plan generation.

Callers tell failures apart by type: an API layer maps
IncompleteProfileError to "complete your profile first" and
PersistenceError to "try again".
"""

from typing import Optional, Sequence


class PlanDomainError(Exception):
    """Base exception for plan domain errors."""

    kind = "plan_error"


class IncompleteProfileError(PlanDomainError):
    """Raised when biometrics are missing or violate an invariant.

    Not retryable until the user corrects the profile. Carries field
    names only, never values.
    """

    kind = "incomplete_profile"

    def __init__(self, user_id: str, problems: Sequence[str] = ()):
        detail = "; ".join(problems) if problems else "profile not found"
        super().__init__(f"Incomplete profile for user {user_id}: {detail}")
        self.user_id = user_id
        self.problems = tuple(problems)


class PersistenceError(PlanDomainError):
    """Raised when a plan store operation fails. Retryable by the caller."""

    kind = "persistence_error"

    def __init__(self, message: str, user_id: Optional[str] = None):
        super().__init__(message)
        self.user_id = user_id


class CacheUnavailableError(PlanDomainError):
    """Raised by a cache backend that cannot serve a request.

    Never fatal: plan generation treats it as a cache miss.
    """

    kind = "cache_unavailable"


class PerUserBatchFailure(PlanDomainError):
    """One user's failure inside a recompute batch.

    Wraps the original error so the batch can record it without
    aborting.
    """

    kind = "per_user_batch_failure"

    def __init__(self, user_id: str, cause: BaseException):
        super().__init__(f"Recompute failed for user {user_id}: {cause}")
        self.user_id = user_id
        self.cause = cause

    @property
    def error_kind(self) -> str:
        """Kind of the wrapped error (``"unexpected"`` for non-domain errors)."""
        if isinstance(self.cause, PlanDomainError):
            return self.cause.kind
        return "unexpected"
