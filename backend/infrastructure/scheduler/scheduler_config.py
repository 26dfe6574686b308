"""
APScheduler configuration and management.

Provides centralized scheduler configuration for the weekly plan
recompute job.
"""

from typing import Any, Optional

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .recompute_job import RecomputeJob, RecomputeSummary

logger = structlog.get_logger(__name__)

RECOMPUTE_JOB_ID = "weekly_plan_recompute"
DEFAULT_CRON = "0 2 * * mon"


class SchedulerManager:
    """
    Manages APScheduler lifecycle and job registration.

    Singleton-like manager for the application scheduler,
    handling initialization, job registration, and shutdown.
    """

    def __init__(self) -> None:
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._recompute_job: Optional[RecomputeJob] = None

    def initialize(
        self,
        recompute_job: RecomputeJob,
        cron_expression: str = DEFAULT_CRON,
    ) -> None:
        """
        Initialize and configure scheduler with jobs.

        Args:
            recompute_job: Weekly recompute job instance
            cron_expression: Cron expression for the job
                (default: 2 AM UTC every Monday)
        """
        if self.scheduler is not None:
            logger.warning("scheduler.already_initialized")
            return

        self._recompute_job = recompute_job

        self.scheduler = AsyncIOScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 3600,
            },
        )

        self._register_recompute_job(cron_expression)

        logger.info("scheduler.initialized")

    def _register_recompute_job(self, cron_expression: str) -> None:
        if self.scheduler is None or self._recompute_job is None:
            raise RuntimeError("Scheduler not initialized")

        trigger = CronTrigger.from_crontab(cron_expression, timezone="UTC")

        self.scheduler.add_job(
            self._recompute_job.run,
            trigger=trigger,
            id=RECOMPUTE_JOB_ID,
            name="Weekly Plan Recompute",
            replace_existing=True,
        )

        logger.info("scheduler.job_registered", job_id=RECOMPUTE_JOB_ID, cron=cron_expression)

    def start(self) -> None:
        """Start scheduler (begin executing jobs)."""
        if self.scheduler is None:
            raise RuntimeError("Scheduler not initialized")

        if self.scheduler.running:
            logger.warning("scheduler.already_running")
            return

        self.scheduler.start()
        logger.info("scheduler.started")

    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown scheduler gracefully.

        Args:
            wait: If True, wait for running jobs to complete
        """
        if self.scheduler is None:
            logger.warning("scheduler.not_initialized")
            return

        if not self.scheduler.running:
            logger.warning("scheduler.not_running")
            return

        self.scheduler.shutdown(wait=wait)
        logger.info("scheduler.shutdown", wait=wait)

    def get_jobs(self) -> list[dict[str, Any]]:
        """
        Get list of scheduled jobs.

        Returns:
            list[dict[str, Any]]: Job id, name, next run time and trigger
        """
        if self.scheduler is None:
            return []

        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": getattr(job, "next_run_time", None),
                "trigger": str(job.trigger),
            }
            for job in self.scheduler.get_jobs()
        ]

    async def trigger_now(self) -> RecomputeSummary:
        """
        Run the recompute job immediately, outside the cron schedule.

        Useful for testing or manual execution.
        """
        if self._recompute_job is None:
            raise RuntimeError("Recompute job not initialized")

        logger.info("scheduler.manual_trigger", job_id=RECOMPUTE_JOB_ID)
        return await self._recompute_job.run()
