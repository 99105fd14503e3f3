"""In-memory menu analysis repository implementation."""

from copy import deepcopy
from typing import Dict, List, Optional

from domain.menu.core.entities.menu_analysis import MenuAnalysis


class InMemoryMenuAnalysisRepository:
    """
    In-memory implementation of IMenuAnalysisRepository port.

    Persistence: Data lost on process restart (in-memory only)
    """

    def __init__(self) -> None:
        """Initialize repository with empty storage."""
        self._storage: Dict[str, MenuAnalysis] = {}

    async def create(self, analysis: MenuAnalysis) -> MenuAnalysis:
        self._storage[analysis.id] = deepcopy(analysis)
        return deepcopy(analysis)

    async def get_by_id(self, analysis_id: str) -> Optional[MenuAnalysis]:
        analysis = self._storage.get(analysis_id)
        return deepcopy(analysis) if analysis is not None else None

    async def find_by_image_hash(self, image_hash: str) -> Optional[MenuAnalysis]:
        """Latest analysis of the same photo, if any."""
        matches = [a for a in self._storage.values() if a.image_hash == image_hash]
        if not matches:
            return None
        return deepcopy(max(matches, key=lambda a: a.created_at))

    async def get_recent(self, limit: int = 10) -> List[MenuAnalysis]:
        """Analyses ordered by created_at descending (newest first)."""
        ordered = sorted(self._storage.values(), key=lambda a: a.created_at, reverse=True)
        return [deepcopy(a) for a in ordered[:limit]]

    def clear(self) -> None:
        """Utility method for testing - not part of the port."""
        self._storage.clear()
