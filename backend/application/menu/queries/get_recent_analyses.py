"""Get recent analyses query."""

import logging
from dataclasses import dataclass
from typing import List

from domain.menu.core.entities.menu_analysis import MenuAnalysis
from domain.shared.ports.menu_analysis_repository import IMenuAnalysisRepository

logger = logging.getLogger(__name__)

MAX_RECENT_LIMIT = 50


@dataclass(frozen=True)
class GetRecentAnalysesQuery:
    """
    Query: Most recent menu analyses.

    Attributes:
        limit: Max records (clamped to 1..50)
    """

    limit: int = 10


class GetRecentAnalysesQueryHandler:
    """Handler for GetRecentAnalysesQuery."""

    def __init__(self, repository: IMenuAnalysisRepository):
        self._repository = repository

    async def handle(self, query: GetRecentAnalysesQuery) -> List[MenuAnalysis]:
        limit = max(1, min(query.limit, MAX_RECENT_LIMIT))
        analyses = await self._repository.get_recent(limit)
        logger.debug("Recent analyses retrieved", extra={"count": len(analyses)})
        return analyses
