"""Analyze menu photo command and handler.

Entry point of the menu-to-dish pipeline: usage gate, content-hash
cache, orchestration, persistence, usage accounting and event.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from domain.menu.core.entities.detected_dish import DetectedDish
from domain.menu.core.entities.menu_analysis import MenuAnalysis
from domain.menu.core.events.menu_analyzed import MenuAnalyzed
from domain.menu.core.value_objects.image_hash import ImageHash
from domain.menu.core.value_objects.token_usage import TokenUsage
from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.menu_analysis_repository import IMenuAnalysisRepository
from ..orchestrators.menu_orchestrator import MenuAnalysisOrchestrator
from ..services.usage_gate import UsageGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzeMenuCommand:
    """
    Command: Analyze a menu photo.

    Attributes:
        image_base64: Base64-encoded photo bytes (data URL prefix allowed)
        user_id: Signed-in caller, if any
        session_id: Anonymous session, if any
    """

    image_base64: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None


@dataclass(frozen=True)
class AnalyzeMenuResult:
    """
    Outcome returned to the API layer.

    Attributes:
        analysis_id: ID of the stored MenuAnalysis
        is_korean_menu: Whether the photo shows a Korean menu
        dishes: Resolved dishes in extraction order
        extracted_food_names: Names read off the menu
        token_usage: Cumulative usage and cost
        cached: True when served from an earlier analysis of the same photo
        cache_date: Creation time of the cached analysis
    """

    analysis_id: str
    is_korean_menu: bool
    dishes: List[DetectedDish]
    extracted_food_names: List[str]
    token_usage: TokenUsage
    cached: bool = False
    cache_date: Optional[datetime] = None

    @classmethod
    def from_analysis(cls, analysis: MenuAnalysis, cached: bool) -> "AnalyzeMenuResult":
        return cls(
            analysis_id=analysis.id,
            is_korean_menu=analysis.is_korean_menu,
            dishes=list(analysis.detected_dishes),
            extracted_food_names=list(analysis.extracted_food_names),
            token_usage=analysis.token_usage,
            cached=cached,
            cache_date=analysis.created_at if cached else None,
        )


class AnalyzeMenuCommandHandler:
    """Handler for AnalyzeMenuCommand."""

    def __init__(
        self,
        orchestrator: MenuAnalysisOrchestrator,
        repository: IMenuAnalysisRepository,
        usage_gate: UsageGate,
        event_bus: IEventBus,
    ):
        """
        Initialize handler.

        Args:
            orchestrator: Menu analysis orchestrator
            repository: Menu analysis repository port
            usage_gate: Free-tier gate
            event_bus: Event bus port
        """
        self._orchestrator = orchestrator
        self._repository = repository
        self._usage_gate = usage_gate
        self._event_bus = event_bus

    async def handle(self, command: AnalyzeMenuCommand) -> AnalyzeMenuResult:
        """
        Execute menu analysis command.

        Flow:
        1. Enforce the free-tier limit
        2. Hash the photo; return the stored analysis on a cache hit
        3. Orchestrate OCR + dish resolution
        4. Persist MenuAnalysis
        5. Count usage and publish MenuAnalyzed

        Rejected requests (usage limit, too many items, failure) are
        neither persisted nor counted.

        Args:
            command: AnalyzeMenuCommand

        Returns:
            AnalyzeMenuResult

        Raises:
            UsageLimitExceededError: If the free tier is exhausted
            InvalidImageError: If the payload is not valid base64
            TooManyItemsError: If the menu shows too many items
            MenuAnalysisError: If the analysis failed entirely
        """
        await self._usage_gate.check(command.user_id, command.session_id)

        image_hash = str(ImageHash.from_base64(command.image_base64))

        logger.info(
            "Analyzing menu photo",
            extra={
                "user_id": command.user_id,
                "session_id": command.session_id,
                "image_hash": image_hash[:16],
            },
        )

        # 1. Cache lookup by content hash
        cached = await self._repository.find_by_image_hash(image_hash)
        if cached is not None:
            logger.info(
                "Cache hit - returning stored analysis",
                extra={"analysis_id": cached.id, "image_hash": image_hash[:16]},
            )
            await self._usage_gate.record(command.user_id, command.session_id)
            await self._publish(cached, generated_count=0, cached=True, user_id=command.user_id)
            return AnalyzeMenuResult.from_analysis(cached, cached=True)

        # 2. Orchestrate analysis
        result = await self._orchestrator.analyze(_strip_data_url(command.image_base64))

        # 3. Persist
        analysis = MenuAnalysis(
            image_hash=image_hash,
            extracted_food_names=result.extracted_names,
            detected_dishes=result.dishes,
            is_korean_menu=result.is_korean_menu,
            token_usage=result.token_usage,
            user_id=command.user_id,
            session_id=None if command.user_id else command.session_id,
        )
        await self._repository.create(analysis)

        logger.info(
            "Menu analyzed and persisted",
            extra={
                "analysis_id": analysis.id,
                "dish_count": analysis.dish_count(),
                "is_korean_menu": analysis.is_korean_menu,
                "cost_usd": analysis.token_usage.cost_usd,
            },
        )

        # 4. Usage + event
        await self._usage_gate.record(command.user_id, command.session_id)
        await self._publish(
            analysis,
            generated_count=result.generated_count,
            cached=False,
            user_id=command.user_id,
        )

        return AnalyzeMenuResult.from_analysis(analysis, cached=False)

    async def _publish(
        self,
        analysis: MenuAnalysis,
        generated_count: int,
        cached: bool,
        user_id: Optional[str],
    ) -> None:
        event = MenuAnalyzed.create(
            analysis_id=analysis.id,
            image_hash=analysis.image_hash,
            is_korean_menu=analysis.is_korean_menu,
            dish_count=analysis.dish_count(),
            generated_count=generated_count,
            cost_usd=0.0 if cached else analysis.token_usage.cost_usd,
            cached=cached,
            user_id=user_id,
        )
        await self._event_bus.publish(event)


def _strip_data_url(image_base64: str) -> str:
    if image_base64.startswith("data:"):
        return image_base64.split(",", 1)[1]
    return image_base64
