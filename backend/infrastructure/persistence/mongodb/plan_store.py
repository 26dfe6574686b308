"""MongoDB implementation of IPlanStore."""

from typing import Any, Dict, List, Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClientSession
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from domain.plan.core.entities.plan_snapshot import PlanSnapshot
from domain.plan.core.ports.plan_store import IPlanStore
from domain.plan.core.value_objects.computed_targets import ComputedTargets
from domain.plan.core.value_objects.plan_id import PlanId
from domain.plan.core.value_objects.plan_status import PlanStatus
from domain.plan.core.value_objects.projection import Projection
from domain.plan.core.value_objects.why_it_works import WhyItWorks

from .base import MongoWritableRepository

logger = structlog.get_logger(__name__)

ONE_ACTIVE_PLAN_INDEX = "one_active_plan_per_user"


class MongoPlanStore(MongoWritableRepository[PlanSnapshot], IPlanStore):
    """MongoDB plan store.

    Layout: one append-only ``plan_snapshots`` collection keyed by
    ``(user_id, plan_id)`` with a ``status`` field. A partial unique index
    on ``user_id`` for active documents backs the one-active-plan rule at
    the database level; ``replace_active`` runs inside a multi-document
    transaction (requires a replica set).
    """

    @property
    def collection_name(self) -> str:
        return "plan_snapshots"

    async def ensure_indexes(self) -> None:
        """Create the indexes the store relies on (idempotent)."""
        try:
            await self.collection.create_index(
                [("user_id", ASCENDING), ("plan_id", ASCENDING)],
                unique=True,
                name="user_plan",
            )
            await self.collection.create_index(
                [("user_id", ASCENDING)],
                unique=True,
                partialFilterExpression={"status": PlanStatus.ACTIVE.value},
                name=ONE_ACTIVE_PLAN_INDEX,
            )
            await self.collection.create_index(
                [("status", ASCENDING), ("user_id", ASCENDING)],
                name="status_user",
            )
        except PyMongoError as e:
            raise self._wrap("create_index", e) from e

    def to_document(self, entity: PlanSnapshot) -> Dict[str, Any]:
        """Convert PlanSnapshot entity to MongoDB document."""
        snapshot = entity
        return {
            "_id": str(snapshot.plan_id.value),
            "plan_id": str(snapshot.plan_id.value),
            "user_id": snapshot.user_id,
            "created_at": self.datetime_to_iso(snapshot.created_at),
            "status": snapshot.status.value,
            "superseded_at": (
                self.datetime_to_iso(snapshot.superseded_at) if snapshot.superseded_at else None
            ),
            "targets": snapshot.targets.to_dict(),
            "projection": snapshot.projection.to_dict() if snapshot.projection else None,
            "why_it_works": snapshot.why_it_works.to_dict(),
            "inputs_fingerprint": snapshot.inputs_fingerprint,
        }

    def from_document(self, doc: Dict[str, Any]) -> PlanSnapshot:
        """Convert MongoDB document to PlanSnapshot entity."""
        return PlanSnapshot(
            plan_id=PlanId.from_string(doc["plan_id"]),
            user_id=doc["user_id"],
            created_at=self.iso_to_datetime(doc["created_at"]),
            targets=ComputedTargets.from_dict(doc["targets"]),
            projection=Projection.from_dict(doc["projection"]) if doc.get("projection") else None,
            why_it_works=WhyItWorks.from_dict(doc["why_it_works"]),
            inputs_fingerprint=doc.get("inputs_fingerprint", ""),
            status=PlanStatus(doc["status"]),
            superseded_at=(
                self.iso_to_datetime(doc["superseded_at"]) if doc.get("superseded_at") else None
            ),
        )

    async def get_active(self, user_id: str) -> Optional[PlanSnapshot]:
        doc = await self._find_one({"user_id": user_id, "status": PlanStatus.ACTIVE.value})
        return self.from_document(doc) if doc else None

    async def replace_active(self, snapshot: PlanSnapshot) -> Optional[PlanSnapshot]:
        """Supersede the active plan and insert ``snapshot`` in one transaction."""
        document = self.to_document(snapshot)
        superseded_at = self.datetime_to_iso(snapshot.created_at)

        async def _supersede_and_insert(
            session: AsyncIOMotorClientSession,
        ) -> Optional[Dict[str, Any]]:
            previous = await self.collection.find_one_and_update(
                {"user_id": snapshot.user_id, "status": PlanStatus.ACTIVE.value},
                {
                    "$set": {
                        "status": PlanStatus.SUPERSEDED.value,
                        "superseded_at": superseded_at,
                    }
                },
                return_document=ReturnDocument.BEFORE,
                session=session,
            )
            await self.collection.insert_one(document, session=session)
            return previous

        try:
            async with await self._client.start_session() as session:
                previous_doc = await session.with_transaction(_supersede_and_insert)
        except PyMongoError as e:
            raise self._wrap("replace_active", e, user_id=snapshot.user_id) from e

        logger.debug(
            "plan_store.replaced_active",
            user_id=snapshot.user_id,
            plan_id=str(snapshot.plan_id),
        )
        return self.from_document(previous_doc) if previous_doc else None

    async def list_history(self, user_id: str) -> List[PlanSnapshot]:
        docs = await self._find_many({"user_id": user_id}, sort=[("created_at", ASCENDING)])
        return [self.from_document(doc) for doc in docs]

    async def list_active_user_ids(self, limit: int, after: Optional[str] = None) -> List[str]:
        filter_dict: Dict[str, Any] = {"status": PlanStatus.ACTIVE.value}
        if after is not None:
            filter_dict["user_id"] = {"$gt": after}

        docs = await self._find_many(
            filter_dict,
            sort=[("user_id", ASCENDING)],
            limit=limit,
            projection={"user_id": 1},
        )
        return [doc["user_id"] for doc in docs]

    async def count_active(self) -> int:
        return await self._count({"status": PlanStatus.ACTIVE.value})
