"""Menu analysis repository port (interface)."""

from typing import List, Optional, Protocol

from domain.menu.core.entities.menu_analysis import MenuAnalysis


class IMenuAnalysisRepository(Protocol):
    """
    Interface for analysis record persistence.

    Records are written once and never mutated; the image hash acts as
    cache key for resubmitted photos.
    """

    async def create(self, analysis: MenuAnalysis) -> MenuAnalysis:
        """Persist a new analysis record."""
        ...

    async def get_by_id(self, analysis_id: str) -> Optional[MenuAnalysis]:
        ...

    async def find_by_image_hash(self, image_hash: str) -> Optional[MenuAnalysis]:
        """
        Latest analysis of a photo.

        Returns:
            Most recent MenuAnalysis with this hash, None if never analyzed
        """
        ...

    async def get_recent(self, limit: int = 10) -> List[MenuAnalysis]:
        """Most recent analyses, newest first."""
        ...
