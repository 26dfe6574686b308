"""Biometrics updated event handler."""

from dataclasses import dataclass

import structlog

from domain.plan.core.events.biometrics_updated import BiometricsUpdated
from domain.plan.core.exceptions.domain_errors import PlanDomainError

from ..services.plan_generation_service import PlanGenerationService

logger = structlog.get_logger(__name__)


@dataclass
class BiometricsUpdatedHandler:
    """Keeps cached plans in step with profile changes.

    Subscribed to BiometricsUpdated on the event bus. A change to any
    calculation input drops the user's cached plan; with
    ``recompute_immediately`` it also regenerates the plan right away.
    """

    plan_service: PlanGenerationService
    recompute_immediately: bool = False

    async def handle(self, event: BiometricsUpdated) -> None:
        if not event.affects_plan():
            logger.debug(
                "biometrics.update_ignored",
                user_id=event.user_id,
                fields=list(event.updated_fields),
            )
            return

        await self.plan_service.invalidate(event.user_id)
        logger.info("biometrics.plan_invalidated", user_id=event.user_id)

        if not self.recompute_immediately:
            return

        try:
            await self.plan_service.generate_plan(event.user_id, force_recompute=True)
        except PlanDomainError as e:
            # Plan stays invalidated; the next request retries.
            logger.warning(
                "biometrics.recompute_failed",
                user_id=event.user_id,
                error_kind=e.kind,
            )
