"""In-memory Korean food repository implementation.

Provides an in-memory implementation of IKoreanFoodRepository port for
testing and local development.
"""

from copy import deepcopy
from typing import Any, Dict, List, Optional

from domain.menu.core.entities.korean_food import KoreanFood


class InMemoryKoreanFoodRepository:
    """
    In-memory implementation of IKoreanFoodRepository port.

    Records are indexed by id, with a secondary index on the Korean name
    enforcing one record per name.

    Thread safety: NOT thread-safe. Within one event loop the
    check-then-insert in create() has no await point, so concurrent
    creates of the same name cannot both insert.
    Persistence: Data lost on process restart (in-memory only)

    Example:
        >>> repository = InMemoryKoreanFoodRepository()
        >>> stored = await repository.create(KoreanFood(name_korean="비빔밥", name_english="Bibimbap"))
        >>> (await repository.find_by_korean_name("비빔밥")).id == stored.id
        True
    """

    def __init__(self) -> None:
        """Initialize repository with empty storage."""
        self._storage: Dict[str, KoreanFood] = {}
        self._by_korean_name: Dict[str, str] = {}

    async def find_by_korean_name(self, name_korean: str) -> Optional[KoreanFood]:
        food_id = self._by_korean_name.get(name_korean)
        if food_id is None:
            return None
        return deepcopy(self._storage[food_id])

    async def find_by_english_name(self, name_english: str) -> Optional[KoreanFood]:
        target = name_english.strip().lower()
        for food in self._storage.values():
            if food.name_english.lower() == target:
                return deepcopy(food)
        return None

    async def search(self, query: str, limit: int = 10) -> List[KoreanFood]:
        """
        Case-insensitive substring search on Korean and English names.

        Results keep insertion order, capped at `limit`.
        """
        needle = query.strip().lower()
        matches = [
            food
            for food in self._storage.values()
            if needle in food.name_korean.lower() or needle in food.name_english.lower()
        ]
        return [deepcopy(food) for food in matches[:limit]]

    async def create(self, food: KoreanFood) -> KoreanFood:
        """
        Store a new record, first write wins.

        Returns:
            Deep copy of `food`, or of the record already stored for the
            same Korean name
        """
        existing_id = self._by_korean_name.get(food.name_korean)
        if existing_id is not None:
            return deepcopy(self._storage[existing_id])

        self._storage[food.id] = deepcopy(food)
        self._by_korean_name[food.name_korean] = food.id
        return deepcopy(food)

    async def update(self, food_id: str, changes: Dict[str, Any]) -> Optional[KoreanFood]:
        food = self._storage.get(food_id)
        if food is None:
            return None

        updated = food.with_changes(changes)
        self._storage[food_id] = updated
        return deepcopy(updated)

    async def list_all(self) -> List[KoreanFood]:
        foods = sorted(self._storage.values(), key=lambda f: f.name_korean)
        return [deepcopy(food) for food in foods]

    def clear(self) -> None:
        """
        Clear all records from storage.

        Note: Utility method for testing - not part of the port
        """
        self._storage.clear()
        self._by_korean_name.clear()
