"""MongoDB implementation of the usage repository.

Collections:
- users: one document per signed-in user (`_id` = user id)
- sessions: one counter per anonymous session (`_id` = session id)
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from domain.menu.core.entities.user_account import UserAccount
from infrastructure.persistence.mongodb.base import MongoBaseRepository


class MongoUsageRepository(MongoBaseRepository[UserAccount]):
    """MongoDB implementation of IUsageRepository."""

    SESSIONS_COLLECTION = "sessions"

    @property
    def collection_name(self) -> str:
        return "users"

    @property
    def sessions(self) -> Any:
        return self._db[self.SESSIONS_COLLECTION]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("email", sparse=True)
        await self.sessions.create_index("updated_at")

    def to_document(self, entity: UserAccount) -> Dict[str, Any]:
        user = entity
        return {
            "_id": user.id,
            "email": user.email,
            "usage_count": user.usage_count,
            "is_premium": user.is_premium,
            "created_at": self.datetime_to_iso(user.created_at),
            "updated_at": self.datetime_to_iso(user.updated_at),
        }

    def from_document(self, doc: Dict[str, Any]) -> UserAccount:
        try:
            now = datetime.now(timezone.utc)
            created = doc.get("created_at")
            updated = doc.get("updated_at")
            return UserAccount(
                id=doc["_id"],
                email=doc.get("email"),
                usage_count=doc.get("usage_count", 0),
                is_premium=doc.get("is_premium", False),
                created_at=self.iso_to_datetime(created) if created else now,
                updated_at=self.iso_to_datetime(updated) if updated else now,
            )
        except KeyError as e:
            raise ValueError(f"Missing required field in MongoDB document: {e}") from e

    async def get_user(self, user_id: str) -> Optional[UserAccount]:
        doc = await self._find_one({"_id": user_id})
        return self.from_document(doc) if doc else None

    async def upsert_user(self, user: UserAccount) -> UserAccount:
        document = self.to_document(user)
        document.pop("_id")
        await self._update_one({"_id": user.id}, {"$set": document}, upsert=True)
        return user

    async def increment_user_usage(self, user_id: str) -> int:
        now = self.datetime_to_iso(datetime.now(timezone.utc))
        doc = await self._find_one_and_update(
            self.collection,
            {"_id": user_id},
            {
                "$inc": {"usage_count": 1},
                "$set": {"updated_at": now},
                "$setOnInsert": {"created_at": now, "is_premium": False, "email": None},
            },
            upsert=True,
        )
        return int(doc["usage_count"]) if doc else 1

    async def increment_session_usage(self, session_id: str) -> int:
        now = self.datetime_to_iso(datetime.now(timezone.utc))
        doc = await self._find_one_and_update(
            self.sessions,
            {"_id": session_id},
            {"$inc": {"usage_count": 1}, "$set": {"updated_at": now}},
            upsert=True,
        )
        return int(doc["usage_count"]) if doc else 1

    async def get_usage_count(
        self,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> int:
        if user_id:
            doc = await self._find_one({"_id": user_id})
            return int(doc.get("usage_count", 0)) if doc else 0
        if session_id:
            doc = await self.sessions.find_one({"_id": session_id})
            return int(doc.get("usage_count", 0)) if doc else 0
        return 0
