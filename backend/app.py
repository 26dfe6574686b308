from __future__ import annotations

import os
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Optional

import structlog
from fastapi import FastAPI

from api.plans import router as plans_router
from application.plan.handlers.biometrics_updated_handler import BiometricsUpdatedHandler
from application.plan.services.plan_generation_service import PlanGenerationService
from domain.plan.core.events.biometrics_updated import BiometricsUpdated
from infrastructure.cache.in_memory_plan_cache import InMemoryPlanCache
from infrastructure.config import Settings, get_settings
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.logging_config import configure_logging
from infrastructure.persistence.factory import create_persistence
from infrastructure.persistence.mongodb.plan_store import MongoPlanStore
from infrastructure.scheduler.recompute_job import RecomputeJob
from infrastructure.scheduler.scheduler_config import SchedulerManager

# Versione letta da env (Docker build ARG -> ENV APP_VERSION)
APP_VERSION = os.getenv("APP_VERSION", "0.0.0-dev")

logger = structlog.get_logger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # pragma: no cover osservabilità
    """Application lifecycle: wire store, cache, service and scheduler.

    Startup:
    1. Persistence backend from REPOSITORY_BACKEND (indexes on mongodb)
    2. Plan cache, event bus, plan service, biometrics hook
    3. Weekly recompute job registered on the cron scheduler

    Shutdown stops the scheduler without waiting for a running batch.
    """
    settings: Settings = app.state.settings
    configure_logging(settings.log_level, settings.log_json)

    plan_store, profile_provider = create_persistence(settings)
    if isinstance(plan_store, MongoPlanStore):
        await plan_store.ensure_indexes()

    cache = InMemoryPlanCache(default_ttl=timedelta(days=settings.plan_cache_ttl_days))
    event_bus = InMemoryEventBus()
    plan_service = PlanGenerationService(
        plan_store=plan_store,
        profile_provider=profile_provider,
        cache=cache,
        event_bus=event_bus,
        cache_ttl=timedelta(days=settings.plan_cache_ttl_days),
        freshness_window=timedelta(days=settings.plan_freshness_days),
    )
    event_bus.subscribe(BiometricsUpdated, BiometricsUpdatedHandler(plan_service).handle)

    recompute_job = RecomputeJob(
        plan_service=plan_service,
        plan_store=plan_store,
        page_size=settings.recompute_page_size,
        concurrency=settings.recompute_concurrency,
        timeout_seconds=settings.recompute_timeout_seconds,
    )
    scheduler = SchedulerManager()
    if settings.scheduler_enabled:
        scheduler.initialize(recompute_job, settings.recompute_cron)
        scheduler.start()

    app.state.plan_store = plan_store
    app.state.plan_cache = cache
    app.state.event_bus = event_bus
    app.state.plan_service = plan_service
    app.state.recompute_job = recompute_job
    app.state.scheduler = scheduler

    logger.info(
        "lifespan.ready",
        backend=settings.repository_backend,
        scheduler_enabled=settings.scheduler_enabled,
    )
    try:
        yield
    finally:
        logger.info("lifespan.shutdown")
        scheduler.shutdown(wait=False)
        event_bus.clear()
        if isinstance(plan_store, MongoPlanStore):
            await plan_store.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    application = FastAPI(
        title="Science Service",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    application.state.settings = settings or get_settings()

    @application.get("/health")
    async def health() -> dict[str, Any]:
        job: Optional[RecomputeJob] = getattr(application.state, "recompute_job", None)
        return {
            "status": "ok",
            "version": APP_VERSION,
            "recompute_state": job.state.value if job is not None else None,
        }

    application.include_router(plans_router)
    return application


app = create_app()
