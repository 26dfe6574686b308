"""PlanGenerationService - generate one user's plan."""

import asyncio
import time
import weakref
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Optional

import structlog

from domain.plan.calculation.explanation_service import ExplanationService
from domain.plan.calculation.target_calculator import TargetCalculator
from domain.plan.core.entities.plan_snapshot import PlanSnapshot
from domain.plan.core.events.plan_generated import PlanGenerated
from domain.plan.core.exceptions.domain_errors import (
    CacheUnavailableError,
    IncompleteProfileError,
)
from domain.plan.core.ports.event_bus import IEventBus
from domain.plan.core.ports.plan_store import IPlanStore
from domain.plan.core.ports.profile_provider import IProfileProvider
from domain.plan.core.ports.result_cache import IPlanResultCache
from domain.plan.core.value_objects.computed_targets import ComputedTargets
from domain.plan.core.value_objects.user_biometrics import UserBiometrics

logger = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL = timedelta(days=7)
DEFAULT_FRESHNESS_WINDOW = timedelta(days=7)
SLOW_GENERATION_MS = 300


class PlanSource(str, Enum):
    """Where a returned plan came from."""

    CACHE = "cache"
    STORE = "store"
    COMPUTED = "computed"


@dataclass(frozen=True)
class GeneratePlanResult:
    """Outcome of ``generate_plan``.

    Attributes:
        snapshot: The user's active plan
        recomputed: True only when targets were freshly calculated
        source: Cache hit, reused stored plan, or new computation
        previous_targets: Targets of the plan this one superseded
            (only for new computations)
    """

    snapshot: PlanSnapshot
    recomputed: bool
    source: PlanSource
    previous_targets: Optional[ComputedTargets] = None


class PlanGenerationService:
    """
    Orchestrates plan generation for a single user.

    Flow:
    1. Serve a live cache entry unless a recompute is forced
    2. Load and validate biometrics (IncompleteProfileError otherwise)
    3. Reuse a fresh stored plan built from identical biometrics
       unless a recompute is forced
    4. Compute targets, projection and explanation
    5. Supersede-and-insert in one store transaction
    6. Refresh the cache

    Steps 5 and 6 run under a per-user lock so the cache always ends up
    holding the last committed plan when recomputes overlap.

    A successful recompute performs exactly one store transaction and
    one cache write. Store failures propagate as PersistenceError with
    no retry; cache failures degrade to recomputation.
    """

    def __init__(
        self,
        plan_store: IPlanStore,
        profile_provider: IProfileProvider,
        cache: IPlanResultCache,
        calculator: Optional[TargetCalculator] = None,
        explanation_service: Optional[ExplanationService] = None,
        event_bus: Optional[IEventBus] = None,
        cache_ttl: timedelta = DEFAULT_CACHE_TTL,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
    ):
        self._plan_store = plan_store
        self._profile_provider = profile_provider
        self._cache = cache
        self._calculator = calculator or TargetCalculator()
        self._explanation_service = explanation_service or ExplanationService()
        self._event_bus = event_bus
        self._cache_ttl = cache_ttl
        self._freshness_window = freshness_window
        self._user_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._user_locks[user_id] = lock
        return lock

    async def generate_plan(self, user_id: str, force_recompute: bool = False) -> GeneratePlanResult:
        """
        Return the user's plan, computing a new one when needed.

        Args:
            user_id: User identifier
            force_recompute: Skip the cache and stored-plan reuse

        Returns:
            GeneratePlanResult with the active snapshot

        Raises:
            IncompleteProfileError: If biometrics are missing or invalid
            PersistenceError: If loading or saving fails
        """
        started = time.perf_counter()
        log = logger.bind(user_id=user_id, force_recompute=force_recompute)

        if not force_recompute:
            cached = await self._read_cache(user_id)
            if cached is not None:
                log.debug("plan.served_from_cache", plan_id=str(cached.plan_id))
                return GeneratePlanResult(snapshot=cached, recomputed=False, source=PlanSource.CACHE)

        biometrics = await self._load_biometrics(user_id)

        if not force_recompute:
            async with self._lock_for(user_id):
                stored = await self._reusable_stored_plan(user_id, biometrics)
                if stored is not None:
                    await self._write_cache(user_id, stored)
            if stored is not None:
                log.info("plan.served_from_store", plan_id=str(stored.plan_id))
                return GeneratePlanResult(snapshot=stored, recomputed=False, source=PlanSource.STORE)

        snapshot = self._build_snapshot(user_id, biometrics)

        async with self._lock_for(user_id):
            previous = await self._plan_store.replace_active(snapshot)
            await self._write_cache(user_id, snapshot)

        if self._event_bus is not None:
            await self._event_bus.publish(
                PlanGenerated.create(
                    plan_id=snapshot.plan_id.value,
                    user_id=user_id,
                    previous_plan_id=previous.plan_id.value if previous else None,
                )
            )

        duration_ms = round((time.perf_counter() - started) * 1000)
        log.info(
            "plan.generated",
            plan_id=str(snapshot.plan_id),
            previous_plan_id=str(previous.plan_id) if previous else None,
            duration_ms=duration_ms,
        )
        if duration_ms > SLOW_GENERATION_MS:
            log.warning("plan.generation_slow", duration_ms=duration_ms, threshold_ms=SLOW_GENERATION_MS)

        return GeneratePlanResult(
            snapshot=snapshot,
            recomputed=True,
            source=PlanSource.COMPUTED,
            previous_targets=previous.targets if previous else None,
        )

    async def invalidate(self, user_id: str) -> None:
        """Drop the cached plan so the next request re-evaluates it."""
        try:
            await self._cache.invalidate(user_id)
        except CacheUnavailableError as e:
            logger.warning("plan.cache_invalidate_failed", user_id=user_id, error=str(e))

    async def _read_cache(self, user_id: str) -> Optional[PlanSnapshot]:
        try:
            return await self._cache.get(user_id)
        except CacheUnavailableError as e:
            logger.warning("plan.cache_unavailable", user_id=user_id, operation="get", error=str(e))
            return None

    async def _write_cache(self, user_id: str, snapshot: PlanSnapshot) -> None:
        try:
            await self._cache.put(user_id, snapshot, self._cache_ttl)
        except CacheUnavailableError as e:
            logger.warning("plan.cache_unavailable", user_id=user_id, operation="put", error=str(e))

    async def _load_biometrics(self, user_id: str) -> UserBiometrics:
        biometrics = await self._profile_provider.get_biometrics(user_id)
        if biometrics is None:
            logger.info("plan.profile_missing", user_id=user_id)
            raise IncompleteProfileError(user_id)

        problems = biometrics.validation_errors()
        if problems:
            logger.info("plan.profile_incomplete", user_id=user_id, fields=problems)
            raise IncompleteProfileError(user_id, problems)

        return biometrics

    async def _reusable_stored_plan(
        self, user_id: str, biometrics: UserBiometrics
    ) -> Optional[PlanSnapshot]:
        active = await self._plan_store.get_active(user_id)
        if active is None:
            return None
        if active.inputs_fingerprint != biometrics.fingerprint():
            return None
        if active.age_seconds() > self._freshness_window.total_seconds():
            return None
        return active

    def _build_snapshot(self, user_id: str, biometrics: UserBiometrics) -> PlanSnapshot:
        now = datetime.now(timezone.utc)
        today: date = now.date()

        computation = self._calculator.compute(biometrics, today)
        why_it_works = self._explanation_service.build(
            computation.targets, computation.projection, biometrics
        )

        return PlanSnapshot.create(
            user_id=user_id,
            targets=computation.targets,
            projection=computation.projection,
            why_it_works=why_it_works,
            inputs_fingerprint=biometrics.fingerprint(),
            created_at=now,
        )
