"""Base MongoDB repository with reusable patterns.

Provides common functionality for MongoDB adapters:
- Connection management
- Document mapping (domain <-> MongoDB)
- Error translation to PersistenceError
- Logging

Read-only adapters inherit from MongoBaseRepository; adapters that also
write inherit from MongoWritableRepository.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

import structlog
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorClientSession,
    AsyncIOMotorCollection,
)
from pymongo.errors import PyMongoError

from domain.plan.core.exceptions.domain_errors import PersistenceError
from infrastructure.config import get_mongodb_database, get_mongodb_uri

TEntity = TypeVar("TEntity")

logger = structlog.get_logger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB adapters.

    Provides:
    - Connection pooling (motor handles this automatically)
    - Document <-> entity mapping hooks
    - PyMongoError -> PersistenceError translation with logging
    - Datetime handling (timezone-aware ISO strings)

    Subclasses must implement:
    - collection_name: Name of MongoDB collection
    - from_document(): Convert MongoDB document to domain entity
    """

    def __init__(self, client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None):
        """
        Initialize repository with optional client.

        Args:
            client: Motor client (if None, creates new one from config)

        Raises:
            ValueError: If no client is given and MONGODB_URI is not set
        """
        if client is None:
            uri = get_mongodb_uri()
            if not uri:
                raise ValueError(
                    "MONGODB_URI not configured. "
                    "Set MONGODB_URI, MONGODB_USER, "
                    "and MONGODB_PASSWORD environment variables."
                )
            self._client: AsyncIOMotorClient[Dict[str, Any]] = AsyncIOMotorClient(uri)
        else:
            self._client = client

        self._db = self._client[get_mongodb_database()]
        self._collection = self._db[self.collection_name]

        logger.info(
            "mongo.repository_initialized",
            repository=self.__class__.__name__,
            collection=self.collection_name,
        )

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """MongoDB collection name."""
        pass

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Convert MongoDB document to domain entity.

        Raises:
            ValueError: If document is invalid or missing required fields
        """
        pass

    @property
    def collection(self) -> AsyncIOMotorCollection[Dict[str, Any]]:
        """Get MongoDB collection handle."""
        return self._collection

    @staticmethod
    def datetime_to_iso(dt: datetime) -> str:
        """
        Convert datetime to ISO string for MongoDB storage.

        Raises:
            ValueError: If datetime is naive
        """
        if dt.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware")
        return dt.isoformat()

    @staticmethod
    def iso_to_datetime(iso_str: str) -> datetime:
        """Convert ISO string to timezone-aware datetime (naive means UTC)."""
        dt = datetime.fromisoformat(iso_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    def _wrap(self, operation: str, error: PyMongoError, **context: Any) -> PersistenceError:
        logger.error(
            "mongo.operation_failed",
            operation=operation,
            collection=self.collection_name,
            error=str(error),
            **context,
        )
        return PersistenceError(
            f"{operation} failed on {self.collection_name}: {error}",
            user_id=context.get("user_id"),
        )

    async def _find_one(
        self,
        filter_dict: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Find single document.

        Raises:
            PersistenceError: If the MongoDB operation fails
        """
        try:
            return await self._collection.find_one(filter_dict, projection, session=session)
        except PyMongoError as e:
            raise self._wrap("find_one", e, user_id=filter_dict.get("user_id")) from e

    async def _find_many(
        self,
        filter_dict: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: Optional[int] = None,
        projection: Optional[Dict[str, int]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents.

        Args:
            filter_dict: MongoDB filter
            sort: Sort order [(field, direction), ...]
            limit: Max documents to return
            projection: Optional projection

        Raises:
            PersistenceError: If the MongoDB operation fails
        """
        try:
            cursor = self._collection.find(filter_dict, projection)
            if sort:
                cursor = cursor.sort(sort)
            if limit:
                cursor = cursor.limit(limit)
            return await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise self._wrap("find_many", e) from e

    async def _count(self, filter_dict: Dict[str, Any]) -> int:
        """
        Count documents.

        Raises:
            PersistenceError: If the MongoDB operation fails
        """
        try:
            return await self._collection.count_documents(filter_dict)
        except PyMongoError as e:
            raise self._wrap("count", e) from e

    async def close(self) -> None:
        """Close MongoDB connection."""
        self._client.close()
        logger.info("mongo.connection_closed", repository=self.__class__.__name__)


class MongoWritableRepository(MongoBaseRepository[TEntity]):
    """MongoDB adapter that also persists entities.

    Subclasses additionally implement to_document().
    """

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """Convert domain entity to MongoDB document."""
        pass
