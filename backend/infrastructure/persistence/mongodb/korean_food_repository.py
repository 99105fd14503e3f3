"""MongoDB implementation of the Korean food repository.

Document Schema:
{
    "_id": "uuid-string",
    "name_korean": "비빔밥",            # unique index
    "name_english": "Bibimbap",
    "description": "...",
    "description_english": "...",
    "ingredients": ["rice", ...],
    "calories": 420,
    "category": "Main Dish",
    "spiciness": 2,
    "allergens": ["egg"],
    "is_vegetarian": false,
    "is_vegan": false,
    "serving_size": "1 bowl",
    "cooking_method": "Mixed",
    "region": "Jeonju",
    "image_url": "https://...",
    "created_at": "2025-11-12T10:00:00+00:00",
    "updated_at": "2025-11-12T10:00:00+00:00"
}
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from domain.menu.core.entities.korean_food import KoreanFood
from infrastructure.persistence.mongodb.base import MongoBaseRepository

logger = logging.getLogger(__name__)


def _case_insensitive(pattern: str) -> Dict[str, str]:
    return {"$regex": pattern, "$options": "i"}


class MongoKoreanFoodRepository(MongoBaseRepository[KoreanFood]):
    """
    MongoDB implementation of IKoreanFoodRepository.

    The unique index on name_korean makes concurrent creates of the same
    dish safe: the loser gets DuplicateKeyError and returns the winner.
    """

    @property
    def collection_name(self) -> str:
        return "korean_foods"

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("name_korean", ASCENDING)], unique=True)
        await self.collection.create_index([("name_english", ASCENDING)])

    # ============================================================
    # Document Mapping (Domain ↔ MongoDB)
    # ============================================================

    def to_document(self, entity: KoreanFood) -> Dict[str, Any]:
        food = entity
        return {
            "_id": food.id,
            "name_korean": food.name_korean,
            "name_english": food.name_english,
            "description": food.description,
            "description_english": food.description_english,
            "ingredients": list(food.ingredients),
            "calories": food.calories,
            "category": food.category,
            "spiciness": food.spiciness,
            "allergens": list(food.allergens),
            "is_vegetarian": food.is_vegetarian,
            "is_vegan": food.is_vegan,
            "serving_size": food.serving_size,
            "cooking_method": food.cooking_method,
            "region": food.region,
            "image_url": food.image_url,
            "created_at": self.datetime_to_iso(food.created_at),
            "updated_at": self.datetime_to_iso(food.updated_at),
        }

    def from_document(self, doc: Dict[str, Any]) -> KoreanFood:
        try:
            return KoreanFood(
                id=doc["_id"],
                name_korean=doc["name_korean"],
                name_english=doc["name_english"],
                description=doc.get("description", ""),
                description_english=doc.get("description_english"),
                ingredients=list(doc.get("ingredients", [])),
                calories=doc.get("calories", 0),
                category=doc.get("category", ""),
                spiciness=doc.get("spiciness", 0),
                allergens=list(doc.get("allergens", [])),
                is_vegetarian=doc.get("is_vegetarian", False),
                is_vegan=doc.get("is_vegan", False),
                serving_size=doc.get("serving_size", ""),
                cooking_method=doc.get("cooking_method", ""),
                region=doc.get("region", ""),
                image_url=doc.get("image_url"),
                created_at=self.iso_to_datetime(doc["created_at"]),
                updated_at=self.iso_to_datetime(doc["updated_at"]),
            )
        except KeyError as e:
            raise ValueError(f"Missing required field in MongoDB document: {e}") from e

    # ============================================================
    # Repository Operations (IKoreanFoodRepository interface)
    # ============================================================

    async def find_by_korean_name(self, name_korean: str) -> Optional[KoreanFood]:
        doc = await self._find_one({"name_korean": name_korean})
        return self.from_document(doc) if doc else None

    async def find_by_english_name(self, name_english: str) -> Optional[KoreanFood]:
        pattern = f"^{re.escape(name_english.strip())}$"
        doc = await self._find_one({"name_english": _case_insensitive(pattern)})
        return self.from_document(doc) if doc else None

    async def search(self, query: str, limit: int = 10) -> List[KoreanFood]:
        pattern = re.escape(query.strip())
        docs = await self._find_many(
            {
                "$or": [
                    {"name_korean": _case_insensitive(pattern)},
                    {"name_english": _case_insensitive(pattern)},
                ]
            },
            limit=limit,
        )
        return [self.from_document(doc) for doc in docs]

    async def create(self, food: KoreanFood) -> KoreanFood:
        try:
            await self._insert_one(self.to_document(food))
            return food
        except DuplicateKeyError:
            existing = await self.find_by_korean_name(food.name_korean)
            if existing is None:
                # Duplicate on _id rather than name_korean
                raise
            logger.info(
                "Korean food already stored, keeping first write",
                extra={"name_korean": food.name_korean, "existing_id": existing.id},
            )
            return existing

    async def update(self, food_id: str, changes: Dict[str, Any]) -> Optional[KoreanFood]:
        doc = await self._find_one({"_id": food_id})
        if doc is None:
            return None

        updated = self.from_document(doc).with_changes(changes)
        document = self.to_document(updated)
        document.pop("_id")
        await self._update_one({"_id": food_id}, {"$set": document})
        return updated

    async def list_all(self) -> List[KoreanFood]:
        docs = await self._find_many({}, sort=[("name_korean", ASCENDING)])
        return [self.from_document(doc) for doc in docs]
