"""Korean food repository port (interface).

Defines contract for the food store the dish resolver reads and warms.
"""

from typing import Any, Dict, List, Optional, Protocol

from domain.menu.core.entities.korean_food import KoreanFood


class IKoreanFoodRepository(Protocol):
    """
    Interface for Korean food record persistence.

    Implementations:
    - In-memory repository (tests, local development)
    - MongoDB repository (production, unique index on name_korean)

    Uniqueness contract: at most one record per Korean name. When two
    requests race to create the same name, the first write wins and the
    second create returns the already stored record.
    """

    async def find_by_korean_name(self, name_korean: str) -> Optional[KoreanFood]:
        """
        Exact match on the Korean name.

        Returns:
            KoreanFood if found, None otherwise
        """
        ...

    async def find_by_english_name(self, name_english: str) -> Optional[KoreanFood]:
        """Case-insensitive exact match on the English name."""
        ...

    async def search(self, query: str, limit: int = 10) -> List[KoreanFood]:
        """
        Case-insensitive substring search on Korean and English names.

        Args:
            query: Text to look for
            limit: Max records to return

        Returns:
            Matching records (possibly empty)
        """
        ...

    async def create(self, food: KoreanFood) -> KoreanFood:
        """
        Persist a new record.

        Returns:
            The stored record: `food` itself, or the record that already
            existed for the same Korean name
        """
        ...

    async def update(self, food_id: str, changes: Dict[str, Any]) -> Optional[KoreanFood]:
        """
        Apply a partial edit to a record.

        Returns:
            Updated record, None if food_id does not exist

        Raises:
            InvalidFoodError: If changes violate record invariants
        """
        ...

    async def list_all(self) -> List[KoreanFood]:
        """All records, ordered by Korean name."""
        ...
