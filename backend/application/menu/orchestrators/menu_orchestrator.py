"""Menu analysis orchestrator.

Coordinates OCR extraction, per-dish resolution and usage accounting for
one menu photo.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from domain.menu.core.entities.detected_dish import DetectedDish
from domain.menu.core.exceptions.domain_errors import (
    DishResolutionError,
    MenuAnalysisError,
    TooManyItemsError,
)
from domain.menu.core.value_objects.token_usage import CostModel, TokenUsage
from domain.menu.ocr.entities.menu_extraction import MenuExtraction
from domain.menu.ocr.ports.menu_text_extractor import IMenuTextExtractor
from domain.menu.resolution.services.dish_resolver import DishResolver
from metrics.menu_analysis import record_dish_resolution, time_analysis

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 3


class AnalysisStage(str, Enum):
    """States of one analysis run.

    START -> EXTRACTING -> (REJECTED | NOT_KOREAN_MENU | RESOLVING)
    RESOLVING -> AGGREGATING -> DONE
    """

    START = "start"
    EXTRACTING = "extracting"
    REJECTED = "rejected"
    NOT_KOREAN_MENU = "not_korean_menu"
    RESOLVING = "resolving"
    AGGREGATING = "aggregating"
    DONE = "done"


TERMINAL_STAGES = frozenset(
    {AnalysisStage.REJECTED, AnalysisStage.NOT_KOREAN_MENU, AnalysisStage.DONE}
)


@dataclass
class MenuAnalysisResult:
    """
    Output of one orchestrated analysis.

    Attributes:
        is_korean_menu: Whether the photo shows a Korean menu
        extracted_names: Names returned by OCR, in extraction order
        dishes: Resolved dishes in extraction order (failed names skipped)
        token_usage: OCR usage plus the estimate of each generated dish
        generated_count: Dishes resolved through the generative fallback
        failed_names: Names that could not be resolved
        stages: Stages the run went through, ending in DONE or NOT_KOREAN_MENU
    """

    is_korean_menu: bool
    extracted_names: List[str]
    dishes: List[DetectedDish] = field(default_factory=list)
    token_usage: TokenUsage = field(default_factory=TokenUsage.zero)
    generated_count: int = 0
    failed_names: List[str] = field(default_factory=list)
    stages: List[AnalysisStage] = field(default_factory=lambda: [AnalysisStage.DONE])

    @property
    def stage(self) -> AnalysisStage:
        """Terminal stage of the run."""
        return self.stages[-1]


class MenuAnalysisOrchestrator:
    """
    Orchestrate the menu-to-dish pipeline.

    Flow:
    1. Extracting: OCR the photo (IMenuTextExtractor)
       - more than max_items detected -> TooManyItemsError, nothing resolved
       - not a Korean menu -> empty result
    2. Resolving: resolve names sequentially via DishResolver; a failed
       name is logged and skipped, the rest continue
    3. Aggregating: dishes in extraction order with cumulative usage

    Example:
        >>> orchestrator = MenuAnalysisOrchestrator(extractor, resolver)
        >>> result = await orchestrator.analyze(image_base64)
        >>> [d.name_korean for d in result.dishes]
        ['비빔밥', '호떡']
    """

    def __init__(
        self,
        text_extractor: IMenuTextExtractor,
        dish_resolver: DishResolver,
        cost_model: Optional[CostModel] = None,
        max_items: int = DEFAULT_MAX_ITEMS,
    ):
        """
        Initialize orchestrator.

        Args:
            text_extractor: OCR provider
            dish_resolver: Per-dish resolution service
            cost_model: Pricing (provides the generated dish estimate)
            max_items: Max menu items per analysis
        """
        self._extractor = text_extractor
        self._resolver = dish_resolver
        self._cost_model = cost_model or CostModel()
        self._max_items = max_items

    async def analyze(self, image_base64: str) -> MenuAnalysisResult:
        """
        Analyze a menu photo.

        Args:
            image_base64: Base64-encoded photo bytes

        Returns:
            MenuAnalysisResult

        Raises:
            TooManyItemsError: If the menu shows more than max_items items
            MenuAnalysisError: If extraction failed entirely
        """
        with time_analysis():
            return await self._run(image_base64)

    async def _run(self, image_base64: str) -> MenuAnalysisResult:
        stages = [AnalysisStage.START]

        _advance(stages, AnalysisStage.EXTRACTING)
        extraction = await self._extract(image_base64)

        detected = extraction.detected_count()
        if detected > self._max_items:
            logger.warning(
                "Menu rejected: too many items",
                extra={"detected_count": detected, "limit": self._max_items},
            )
            _advance(stages, AnalysisStage.REJECTED)
            raise TooManyItemsError(detected, self._max_items)

        if not extraction.is_korean_menu:
            logger.info("Photo is not a Korean menu")
            _advance(stages, AnalysisStage.NOT_KOREAN_MENU)
            return MenuAnalysisResult(
                is_korean_menu=False,
                extracted_names=list(extraction.extracted_names),
                token_usage=extraction.token_usage,
                stages=stages,
            )

        result = MenuAnalysisResult(
            is_korean_menu=True,
            extracted_names=list(extraction.extracted_names),
            token_usage=extraction.token_usage,
            stages=stages,
        )

        _advance(stages, AnalysisStage.RESOLVING)
        for name in extraction.extracted_names:
            try:
                resolution = await self._resolver.resolve(name)
            except DishResolutionError as e:
                logger.warning(
                    "Skipping dish that failed to resolve",
                    extra={"korean_name": name, "error": str(e)},
                )
                record_dish_resolution("failed")
                result.failed_names.append(name)
                continue

            result.dishes.append(resolution.dish)
            record_dish_resolution(resolution.dish.source.value)
            if resolution.generated:
                result.generated_count += 1
                result.token_usage = result.token_usage + self._cost_model.generation_estimate()

        _advance(stages, AnalysisStage.AGGREGATING)
        logger.info(
            "Menu analysis complete",
            extra={
                "extracted": len(result.extracted_names),
                "resolved": len(result.dishes),
                "generated": result.generated_count,
                "failed": len(result.failed_names),
                "cost_usd": result.token_usage.cost_usd,
            },
        )
        _advance(stages, AnalysisStage.DONE)

        return result

    async def _extract(self, image_base64: str) -> MenuExtraction:
        try:
            return await self._extractor.extract_names(image_base64)
        except Exception as e:
            logger.error(
                "Menu extraction failed",
                extra={"error": str(e)},
                exc_info=True,
            )
            raise MenuAnalysisError() from e


def _advance(stages: List[AnalysisStage], stage: AnalysisStage) -> None:
    if stages[-1] in TERMINAL_STAGES:
        raise RuntimeError(f"Analysis already finished in stage '{stages[-1].value}'")
    logger.debug(
        "Analysis stage",
        extra={"from_stage": stages[-1].value, "to_stage": stage.value},
    )
    stages.append(stage)
