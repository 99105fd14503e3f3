"""Korean food catalogue queries."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from domain.menu.core.entities.korean_food import KoreanFood
from domain.shared.ports.korean_food_repository import IKoreanFoodRepository

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


@dataclass(frozen=True)
class SearchKoreanFoodsQuery:
    """
    Query: Substring search on Korean and English names.

    Attributes:
        query: Text to look for (an empty query lists the whole catalogue)
    """

    query: str = ""


@dataclass(frozen=True)
class GetKoreanFoodQuery:
    """
    Query: Single record by exact Korean name.

    Attributes:
        name_korean: Korean dish name
    """

    name_korean: str


class SearchKoreanFoodsQueryHandler:
    """Handler for SearchKoreanFoodsQuery."""

    def __init__(self, repository: IKoreanFoodRepository):
        self._repository = repository

    async def handle(self, query: SearchKoreanFoodsQuery) -> List[KoreanFood]:
        text = query.query.strip()
        if not text:
            return await self._repository.list_all()

        foods = await self._repository.search(text, limit=SEARCH_LIMIT)
        logger.debug("Food search", extra={"query": text, "count": len(foods)})
        return foods


class GetKoreanFoodQueryHandler:
    """Handler for GetKoreanFoodQuery."""

    def __init__(self, repository: IKoreanFoodRepository):
        self._repository = repository

    async def handle(self, query: GetKoreanFoodQuery) -> Optional[KoreanFood]:
        return await self._repository.find_by_korean_name(query.name_korean.strip())
