"""Domain service mapping a Korean dish name to a DetectedDish.

Cache-first, generate-on-miss: the food store is consulted first; on a
miss the generative fallback synthesizes the record, which is persisted
so the next request for the same name is a store hit.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from domain.menu.core.entities.detected_dish import DetectedDish
from domain.menu.core.entities.korean_food import KoreanFood
from domain.menu.core.exceptions.domain_errors import DishResolutionError
from domain.menu.images.entities.image_result import ImageResult
from domain.menu.images.services.image_waterfall import ImageResolutionWaterfall
from domain.menu.resolution.ports.dish_detail_generator import IDishDetailGenerator
from domain.shared.ports.korean_food_repository import IKoreanFoodRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DishResolution:
    """Resolved dish plus whether the generative fallback ran."""

    dish: DetectedDish
    generated: bool


class DishResolver:
    """
    Domain service resolving one dish name.

    Flow:
    1. Exact lookup of the Korean name in the food store
    2. Hit: attach image (Korean + stored English name), confidence 1.0
    3. Miss: synthesize record, attach image using the *generated* English
       name, persist record with its image URL, confidence 0.8
    4. Lost creation race: the record stored first is served, confidence 1.0

    Resolving a stored name never writes to the store.

    Example:
        >>> resolver = DishResolver(food_repository, generator, waterfall)
        >>> resolution = await resolver.resolve("비빔밥")
        >>> resolution.dish.source.value
        'database'
    """

    def __init__(
        self,
        food_repository: IKoreanFoodRepository,
        detail_generator: IDishDetailGenerator,
        image_waterfall: ImageResolutionWaterfall,
    ):
        """
        Initialize resolver.

        Args:
            food_repository: Food store (lookup and cache warming)
            detail_generator: Generative fallback for unknown names
            image_waterfall: Image resolution service
        """
        self._foods = food_repository
        self._generator = detail_generator
        self._images = image_waterfall

    async def resolve(self, korean_name: str) -> DishResolution:
        """
        Resolve a Korean dish name.

        Args:
            korean_name: Name exactly as extracted from the menu

        Returns:
            DishResolution with the DetectedDish and the generation flag

        Raises:
            DishResolutionError: On any store, generation or image failure
        """
        name = korean_name.strip()
        if not name:
            raise DishResolutionError(korean_name, "empty name")

        try:
            stored = await self._foods.find_by_korean_name(name)
            if stored is not None:
                return DishResolution(dish=await self._from_store(stored), generated=False)
            return DishResolution(dish=await self._from_generator(name), generated=True)
        except DishResolutionError:
            raise
        except Exception as e:
            logger.error(
                "Dish resolution failed",
                extra={"korean_name": name, "error": str(e)},
                exc_info=True,
            )
            raise DishResolutionError(name, str(e)) from e

    async def _from_store(self, food: KoreanFood) -> DetectedDish:
        logger.info(
            "Dish found in store",
            extra={"korean_name": food.name_korean, "food_id": food.id},
        )
        image = await self._resolve_image(food.name_korean, food.name_english)
        return DetectedDish.from_store(food, image)

    async def _from_generator(self, name: str) -> DetectedDish:
        logger.info("Dish not in store, generating details", extra={"korean_name": name})

        draft = await self._generator.synthesize(name)
        image = await self._resolve_image(name, draft.name_english)

        food = KoreanFood.from_draft(draft, image_url=image.url if image else None)
        stored = await self._foods.create(food)

        if stored.id != food.id:
            # Another request created the record first: serve the stored one
            logger.info(
                "Food record already created concurrently",
                extra={"korean_name": name, "food_id": stored.id},
            )
            if stored.name_english != food.name_english:
                image = await self._resolve_image(stored.name_korean, stored.name_english)
            return DetectedDish.from_store(stored, image)

        return DetectedDish.from_generated(food, image)

    async def _resolve_image(self, korean_name: str, english_name: str) -> Optional[ImageResult]:
        return await self._images.resolve_with_fallback(korean_name, english_name)
