"""
Weekly plan recompute background job.

Walks every user with an active plan, page by page, and regenerates
their plan with a bounded pool of workers. One user's failure never
aborts the batch; a global timeout or an external cancel event stops
dispatching and leaves the remaining users skipped.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import structlog

from application.plan.services.plan_generation_service import (
    GeneratePlanResult,
    PlanGenerationService,
)
from domain.plan.core.exceptions.domain_errors import PerUserBatchFailure
from domain.plan.core.ports.plan_store import IPlanStore

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 1000
DEFAULT_CONCURRENCY = 10
CALORIE_CHANGE_THRESHOLD = 50
PROTEIN_CHANGE_THRESHOLD = 10


class JobState(str, Enum):
    """Lifecycle of a recompute run."""

    IDLE = "idle"
    RUNNING = "running"
    FETCHING = "fetching"
    DISPATCHING = "dispatching"
    AWAITING = "awaiting"
    RECORDING = "recording"
    COMPLETED = "completed"
    ABORTED = "aborted"

    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.ABORTED)


@dataclass(frozen=True)
class UserRecomputeUpdate:
    """A user whose targets moved noticeably in this run."""

    user_id: str
    previous_calories: int
    new_calories: int
    previous_protein: int
    new_protein: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "previous_calories": self.previous_calories,
            "new_calories": self.new_calories,
            "previous_protein": self.previous_protein,
            "new_protein": self.new_protein,
            "reason": self.reason,
        }


@dataclass
class RecomputeSummary:
    """
    Tally of one recompute run.

    ``success_count + error_count + skipped_count == total_users`` once
    the run has finished.
    """

    total_users: int = 0
    success_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    duration_seconds: float = 0.0
    failed_user_ids: List[str] = field(default_factory=list)
    failures: List[PerUserBatchFailure] = field(default_factory=list)
    updates: List[UserRecomputeUpdate] = field(default_factory=list)
    state: JobState = JobState.IDLE

    def record_failure(self, failure: PerUserBatchFailure) -> None:
        self.error_count += 1
        self.failed_user_ids.append(failure.user_id)
        self.failures.append(failure)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_users": self.total_users,
            "success_count": self.success_count,
            "error_count": self.error_count,
            "skipped_count": self.skipped_count,
            "duration_seconds": self.duration_seconds,
            "failed_user_ids": list(self.failed_user_ids),
            "failures": [
                {"user_id": f.user_id, "error_kind": f.error_kind} for f in self.failures
            ],
            "updates": [u.to_dict() for u in self.updates],
            "state": self.state.value,
        }


class RecomputeJob:
    """
    Background job for the weekly plan recompute.

    Each page of active user ids is pushed onto an asyncio.Queue drained
    by at most ``concurrency`` worker tasks, so no more than that many
    ``generate_plan`` calls are in flight at any time.
    """

    def __init__(
        self,
        plan_service: PlanGenerationService,
        plan_store: IPlanStore,
        page_size: int = DEFAULT_PAGE_SIZE,
        concurrency: int = DEFAULT_CONCURRENCY,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Initialize recompute job.

        Args:
            plan_service: Service used to regenerate each plan
            plan_store: Store used to page through active users
            page_size: User ids fetched per page
            concurrency: Maximum concurrent plan generations
            timeout_seconds: Global deadline, None for no deadline
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

        self.plan_service = plan_service
        self.plan_store = plan_store
        self.page_size = page_size
        self.concurrency = concurrency
        self.timeout_seconds = timeout_seconds

        self.state = JobState.IDLE
        self.last_summary: Optional[RecomputeSummary] = None
        self._in_flight = 0
        self.max_in_flight = 0

    @property
    def is_running(self) -> bool:
        return self.state is not JobState.IDLE and not self.state.is_terminal()

    async def run(self, cancel_event: Optional[asyncio.Event] = None) -> RecomputeSummary:
        """
        Execute the recompute over all users with an active plan.

        Main entry point called by the scheduler.

        Args:
            cancel_event: Setting it stops dispatching new users

        Returns:
            RecomputeSummary: Counts, failures and notable target changes

        Raises:
            RuntimeError: If a run is already in progress
            PersistenceError: If paging through users fails
        """
        if self.is_running:
            raise RuntimeError("Recompute job already running")

        self.state = JobState.RUNNING
        self.max_in_flight = 0
        summary = RecomputeSummary(state=JobState.RUNNING)
        started = time.perf_counter()
        stop = asyncio.Event()
        reason: List[str] = []

        logger.info(
            "recompute.started",
            page_size=self.page_size,
            concurrency=self.concurrency,
            timeout_seconds=self.timeout_seconds,
        )

        loop = asyncio.get_running_loop()
        timeout_handle = None
        if self.timeout_seconds is not None:
            timeout_handle = loop.call_later(self.timeout_seconds, self._halt, stop, reason, "timeout")

        watcher: Optional["asyncio.Task[None]"] = None
        if cancel_event is not None:
            if cancel_event.is_set():
                self._halt(stop, reason, "cancelled")
            else:
                watcher = asyncio.create_task(self._watch_cancel(cancel_event, stop, reason))

        try:
            after: Optional[str] = None
            while True:
                self.state = JobState.FETCHING
                user_ids = await self.plan_store.list_active_user_ids(self.page_size, after)
                if not user_ids:
                    break

                summary.total_users += len(user_ids)
                after = user_ids[-1]

                if stop.is_set():
                    summary.skipped_count += len(user_ids)
                else:
                    await self._process_page(user_ids, stop, summary)

                if len(user_ids) < self.page_size:
                    break
        except Exception:
            self.state = JobState.ABORTED
            summary.state = JobState.ABORTED
            summary.duration_seconds = time.perf_counter() - started
            self.last_summary = summary
            logger.error("recompute.failed", exc_info=True)
            raise
        finally:
            if timeout_handle is not None:
                timeout_handle.cancel()
            if watcher is not None:
                watcher.cancel()

        summary.state = JobState.ABORTED if stop.is_set() else JobState.COMPLETED
        summary.duration_seconds = time.perf_counter() - started
        self.state = summary.state
        self.last_summary = summary

        logger.info(
            "recompute.finished",
            state=summary.state.value,
            stop_reason=reason[0] if reason else None,
            total_users=summary.total_users,
            success_count=summary.success_count,
            error_count=summary.error_count,
            skipped_count=summary.skipped_count,
            updated_count=len(summary.updates),
            duration_seconds=round(summary.duration_seconds, 3),
        )
        return summary

    async def _process_page(
        self, user_ids: List[str], stop: asyncio.Event, summary: RecomputeSummary
    ) -> None:
        self.state = JobState.DISPATCHING
        queue: "asyncio.Queue[str]" = asyncio.Queue()
        for user_id in user_ids:
            queue.put_nowait(user_id)

        workers = [
            asyncio.create_task(self._worker(queue, stop, summary))
            for _ in range(min(self.concurrency, len(user_ids)))
        ]

        self.state = JobState.AWAITING
        await asyncio.gather(*workers)

        self.state = JobState.RECORDING
        # Whatever is still queued was never dispatched.
        summary.skipped_count += queue.qsize()

    async def _worker(
        self, queue: "asyncio.Queue[str]", stop: asyncio.Event, summary: RecomputeSummary
    ) -> None:
        while not stop.is_set():
            try:
                user_id = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            await self._recompute_user(user_id, summary)

    async def _recompute_user(self, user_id: str, summary: RecomputeSummary) -> None:
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            result = await self.plan_service.generate_plan(user_id, force_recompute=True)
        except Exception as e:
            failure = PerUserBatchFailure(user_id, e)
            summary.record_failure(failure)
            logger.warning(
                "recompute.user_failed",
                user_id=user_id,
                error_kind=failure.error_kind,
            )
            return
        finally:
            self._in_flight -= 1

        summary.success_count += 1
        update = self._detect_update(user_id, result)
        if update is not None:
            summary.updates.append(update)

    @staticmethod
    def _detect_update(user_id: str, result: GeneratePlanResult) -> Optional[UserRecomputeUpdate]:
        """Report users whose calories or protein moved past the thresholds."""
        previous = result.previous_targets
        if previous is None:
            return None

        current = result.snapshot.targets
        calories_diff = abs(current.calorie_target - previous.calorie_target)
        protein_diff = abs(current.protein_target_grams - previous.protein_target_grams)

        reasons = []
        if calories_diff > CALORIE_CHANGE_THRESHOLD:
            reasons.append(f"calories changed by {calories_diff}kcal")
        if protein_diff > PROTEIN_CHANGE_THRESHOLD:
            reasons.append(f"protein changed by {protein_diff}g")
        if not reasons:
            return None

        return UserRecomputeUpdate(
            user_id=user_id,
            previous_calories=previous.calorie_target,
            new_calories=current.calorie_target,
            previous_protein=previous.protein_target_grams,
            new_protein=current.protein_target_grams,
            reason=", ".join(reasons),
        )

    async def _watch_cancel(
        self, cancel_event: asyncio.Event, stop: asyncio.Event, reason: List[str]
    ) -> None:
        await cancel_event.wait()
        self._halt(stop, reason, "cancelled")

    @staticmethod
    def _halt(stop: asyncio.Event, reason: List[str], why: str) -> None:
        if not stop.is_set():
            reason.append(why)
            logger.warning("recompute.stopping", reason=why)
            stop.set()

    async def health_check(self) -> bool:
        """
        Check if job dependencies are healthy.

        Returns:
            bool: True if the store answers
        """
        try:
            await self.plan_store.count_active()
            return True
        except Exception as e:
            logger.error("recompute.health_check_failed", error=str(e))
            return False
