"""Base MongoDB repository with reusable patterns.

Provides common functionality for all MongoDB repositories:
- Connection management
- Document mapping (domain ↔ MongoDB)
- Error handling
- Logging

All concrete MongoDB repositories should inherit from MongoBaseRepository.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from infrastructure.config import get_mongodb_database, get_mongodb_uri

# Type variable for the domain entity
TEntity = TypeVar("TEntity")

logger = logging.getLogger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB repositories.

    Provides common functionality:
    - Connection pooling (motor handles this automatically)
    - Document ↔ Entity mapping
    - Error handling with proper logging
    - Datetime handling (timezone-aware, stored as ISO strings)

    Entity ids are already strings (uuid4) and are stored as `_id`.

    Subclasses must implement:
    - collection_name: Name of MongoDB collection
    - to_document(): Convert domain entity to MongoDB document
    - from_document(): Convert MongoDB document to domain entity
    - ensure_indexes(): Create the indexes the repository relies on
    """

    def __init__(
        self,
        client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None,
        database_name: Optional[str] = None,
    ):
        """
        Initialize repository with optional client.

        Args:
            client: Motor client (if None, creates new one from config)
            database_name: Database (defaults to MONGODB_DATABASE)
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

        self._db = self._client[database_name or get_mongodb_database()]
        self._collection = self._db[self.collection_name]

        logger.info(
            "Initialized Mongo repository",
            extra={"repository": self.__class__.__name__, "collection": self.collection_name},
        )

    # ============================================================
    # Abstract Properties/Methods (must be implemented)
    # ============================================================

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """MongoDB collection name."""
        pass

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """Convert domain entity to MongoDB document."""
        pass

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Convert MongoDB document to domain entity.

        Raises:
            ValueError: If document is invalid or missing required fields
        """
        pass

    @abstractmethod
    async def ensure_indexes(self) -> None:
        """Create the indexes this repository relies on (idempotent)."""
        pass

    # ============================================================
    # Protected Utility Methods (for subclasses)
    # ============================================================

    @property
    def collection(self) -> AsyncIOMotorCollection[Dict[str, Any]]:
        """Get MongoDB collection handle."""
        return self._collection

    @staticmethod
    def datetime_to_iso(dt: datetime) -> str:
        """
        Convert datetime to ISO string for MongoDB storage.

        Raises:
            ValueError: If the datetime is naive
        """
        if dt.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware")
        return dt.astimezone(timezone.utc).isoformat()

    @staticmethod
    def iso_to_datetime(iso_str: str) -> datetime:
        """Convert ISO string to timezone-aware datetime (naive means UTC)."""
        dt = datetime.fromisoformat(iso_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    async def _find_one(
        self,
        filter_dict: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Find single document with error handling.

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            return await self._collection.find_one(filter_dict, sort=sort)
        except Exception as e:
            logger.error(
                "Error in find_one",
                extra={"collection": self.collection_name, "filter": filter_dict, "error": str(e)},
            )
            raise

    async def _find_many(
        self,
        filter_dict: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents with error handling.

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            cursor = self._collection.find(filter_dict)

            if sort:
                cursor = cursor.sort(sort)
            if limit:
                cursor = cursor.limit(limit)

            return await cursor.to_list(length=limit)
        except Exception as e:
            logger.error(
                "Error in find_many",
                extra={"collection": self.collection_name, "filter": filter_dict, "error": str(e)},
            )
            raise

    async def _insert_one(self, document: Dict[str, Any]) -> None:
        """
        Insert single document with error handling.

        Raises:
            DuplicateKeyError: On unique index conflicts (not logged, callers
                decide what a duplicate means)
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            await self._collection.insert_one(document)
        except DuplicateKeyError:
            raise
        except Exception as e:
            logger.error(
                "Error in insert_one",
                extra={"collection": self.collection_name, "error": str(e)},
            )
            raise

    async def _update_one(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
        upsert: bool = False,
    ) -> int:
        """
        Update single document with error handling.

        Returns:
            Number of documents matched (0 or 1)

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            result = await self._collection.update_one(filter_dict, update_dict, upsert=upsert)
            return result.matched_count
        except Exception as e:
            logger.error(
                "Error in update_one",
                extra={"collection": self.collection_name, "filter": filter_dict, "error": str(e)},
            )
            raise

    async def _find_one_and_update(
        self,
        collection: AsyncIOMotorCollection[Dict[str, Any]],
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
        upsert: bool = False,
    ) -> Optional[Dict[str, Any]]:
        """
        Atomic update returning the document after the change.

        Takes the collection explicitly so repositories owning several
        collections can reuse it.
        """
        try:
            return await collection.find_one_and_update(
                filter_dict,
                update_dict,
                upsert=upsert,
                return_document=ReturnDocument.AFTER,
            )
        except Exception as e:
            logger.error(
                "Error in find_one_and_update",
                extra={"collection": collection.name, "filter": filter_dict, "error": str(e)},
            )
            raise

    async def _count(self, filter_dict: Dict[str, Any]) -> int:
        """
        Count documents with error handling.

        Raises:
            Exception: If MongoDB operation fails (logged and re-raised)
        """
        try:
            return await self._collection.count_documents(filter_dict)
        except Exception as e:
            logger.error(
                "Error in count",
                extra={"collection": self.collection_name, "filter": filter_dict, "error": str(e)},
            )
            raise

    async def close(self) -> None:
        """Close MongoDB connection."""
        self._client.close()
        logger.info("Closed Mongo connection", extra={"repository": self.__class__.__name__})
