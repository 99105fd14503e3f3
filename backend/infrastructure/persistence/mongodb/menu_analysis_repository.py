"""MongoDB implementation of the menu analysis repository.

Detected dishes are embedded as an array of subdocuments; token usage
is an embedded document with the client-facing snake_case keys.
"""

from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING

from domain.menu.core.entities.detected_dish import DetectedDish
from domain.menu.core.entities.menu_analysis import MenuAnalysis
from domain.menu.core.value_objects.token_usage import TokenUsage
from infrastructure.persistence.mongodb.base import MongoBaseRepository


class MongoMenuAnalysisRepository(MongoBaseRepository[MenuAnalysis]):
    """
    MongoDB implementation of IMenuAnalysisRepository.

    Indexes:
    - image_hash: cache lookup by photo content
    - created_at (desc): recent analyses list
    """

    @property
    def collection_name(self) -> str:
        return "menu_analyses"

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("image_hash", ASCENDING)])
        await self.collection.create_index([("created_at", DESCENDING)])

    def to_document(self, entity: MenuAnalysis) -> Dict[str, Any]:
        analysis = entity
        return {
            "_id": analysis.id,
            "image_hash": analysis.image_hash,
            "extracted_food_names": list(analysis.extracted_food_names),
            "detected_dishes": [dish.to_dict() for dish in analysis.detected_dishes],
            "is_korean_menu": analysis.is_korean_menu,
            "token_usage": analysis.token_usage.to_dict(),
            "user_id": analysis.user_id,
            "session_id": analysis.session_id,
            "created_at": self.datetime_to_iso(analysis.created_at),
        }

    def from_document(self, doc: Dict[str, Any]) -> MenuAnalysis:
        try:
            return MenuAnalysis(
                id=doc["_id"],
                image_hash=doc["image_hash"],
                extracted_food_names=list(doc.get("extracted_food_names", [])),
                detected_dishes=[DetectedDish.from_dict(d) for d in doc.get("detected_dishes", [])],
                is_korean_menu=doc["is_korean_menu"],
                token_usage=TokenUsage.from_dict(doc.get("token_usage") or {}),
                user_id=doc.get("user_id"),
                session_id=doc.get("session_id"),
                created_at=self.iso_to_datetime(doc["created_at"]),
            )
        except KeyError as e:
            raise ValueError(f"Missing required field in MongoDB document: {e}") from e

    async def create(self, analysis: MenuAnalysis) -> MenuAnalysis:
        await self._insert_one(self.to_document(analysis))
        return analysis

    async def get_by_id(self, analysis_id: str) -> Optional[MenuAnalysis]:
        doc = await self._find_one({"_id": analysis_id})
        return self.from_document(doc) if doc else None

    async def find_by_image_hash(self, image_hash: str) -> Optional[MenuAnalysis]:
        doc = await self._find_one(
            {"image_hash": image_hash},
            sort=[("created_at", DESCENDING)],
        )
        return self.from_document(doc) if doc else None

    async def get_recent(self, limit: int = 10) -> List[MenuAnalysis]:
        docs = await self._find_many({}, sort=[("created_at", DESCENDING)], limit=limit)
        return [self.from_document(doc) for doc in docs]
