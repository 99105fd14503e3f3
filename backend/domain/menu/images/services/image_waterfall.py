"""Domain service resolving the best image for a dish.

Tries providers in priority order and returns the first candidate that
passes the reachability probe.
"""

import logging
from typing import Optional, Sequence

from domain.menu.core.exceptions.domain_errors import ProviderUnavailableError
from domain.menu.images.entities.image_result import ImageResult
from domain.menu.images.ports.image_provider import (
    IFallbackImageProvider,
    IImageProvider,
    IImageValidator,
)
from domain.menu.images.services.queries import alternate_korean_queries

logger = logging.getLogger(__name__)

DEFAULT_MAX_ALTERNATE_QUERIES = 2


class ImageResolutionWaterfall:
    """
    Ordered fallback over image providers, first validated hit wins.

    Order:
    1. Korean-specialized provider
    2. Stock providers, in the given order
    3. Alternate phrasings on the Korean provider (only if step 1 found a
       candidate, capped at max_alternate_queries)
    4. None

    resolve_with_fallback() adds a last resort on the default provider:
    a dish specific search, then its generic Korean food photo.

    Provider and validation failures never propagate: they just move the
    waterfall to the next step.

    Example:
        >>> waterfall = ImageResolutionWaterfall(
        ...     korean_provider=naver,
        ...     stock_providers=[pexels, pixabay],
        ...     validator=validator,
        ...     fallback_provider=unsplash,
        ... )
        >>> image = await waterfall.resolve_with_fallback("비빔밥", "Bibimbap")
    """

    def __init__(
        self,
        korean_provider: Optional[IImageProvider],
        stock_providers: Sequence[IImageProvider],
        validator: IImageValidator,
        fallback_provider: Optional[IFallbackImageProvider] = None,
        max_alternate_queries: int = DEFAULT_MAX_ALTERNATE_QUERIES,
    ):
        """
        Initialize waterfall.

        Args:
            korean_provider: Korean-specialized provider (None to skip)
            stock_providers: Stock providers in priority order
            validator: Reachability probe for candidate URLs
            fallback_provider: Default provider used as last resort
            max_alternate_queries: Cap on alternate Korean phrasings
        """
        if max_alternate_queries < 0:
            raise ValueError("max_alternate_queries cannot be negative")

        self._korean = korean_provider
        self._stock = list(stock_providers)
        self._validator = validator
        self._fallback = fallback_provider
        self._max_alternates = max_alternate_queries

    async def resolve(self, korean_name: str, english_name: str) -> Optional[ImageResult]:
        """
        Run steps 1-3 of the waterfall.

        Args:
            korean_name: Dish name in Korean
            english_name: Dish name in English

        Returns:
            First validated ImageResult, or None when every step failed
        """
        korean_hit: Optional[ImageResult] = None

        if self._korean is not None:
            korean_hit = await self._search(self._korean, korean_name, english_name)
            if korean_hit is not None and await self._is_valid(korean_hit):
                return korean_hit

        for provider in self._stock:
            result = await self._search(provider, korean_name, english_name)
            if result is not None and await self._is_valid(result):
                return result

        if self._korean is not None and korean_hit is not None:
            queries = alternate_korean_queries(korean_name, english_name)
            for query in queries[: self._max_alternates]:
                result = await self._search(self._korean, korean_name, english_name, query)
                if result is not None and await self._is_valid(result):
                    return result

        logger.info(
            "No validated image from primary providers",
            extra={"korean_name": korean_name, "english_name": english_name},
        )
        return None

    async def resolve_with_fallback(
        self, korean_name: str, english_name: str
    ) -> Optional[ImageResult]:
        """
        Run the full waterfall including the default provider last resort.

        Returns:
            ImageResult or None (the dish is then served without image)
        """
        result = await self.resolve(korean_name, english_name)
        if result is not None or self._fallback is None:
            return result

        fallback = self._fallback
        result = await self._search(fallback, korean_name, english_name)
        if result is not None and await self._is_valid(result):
            return result

        try:
            generic = await fallback.search_generic()
        except Exception as e:
            logger.warning(
                "Generic image search failed",
                extra={"provider": fallback.name, "error": str(e)},
            )
            return None

        if generic is not None and await self._is_valid(generic):
            return generic

        logger.info(
            "No image found for dish",
            extra={"korean_name": korean_name, "english_name": english_name},
        )
        return None

    async def _search(
        self,
        provider: IImageProvider,
        korean_name: str,
        english_name: str,
        query: Optional[str] = None,
    ) -> Optional[ImageResult]:
        if not provider.enabled:
            return None
        try:
            return await provider.search(korean_name, english_name, query=query)
        except ProviderUnavailableError as e:
            logger.info(
                "Image provider unavailable",
                extra={"provider": e.provider, "reason": e.reason},
            )
            return None
        except Exception as e:
            logger.warning(
                "Image provider failed",
                extra={"provider": provider.name, "query": query, "error": str(e)},
            )
            return None

    async def _is_valid(self, result: ImageResult) -> bool:
        try:
            valid = await self._validator.validate(result.url)
        except Exception as e:
            logger.warning(
                "Image validation raised",
                extra={"url": result.url, "error": str(e)},
            )
            return False

        if not valid:
            logger.info(
                "Image candidate rejected",
                extra={"provider": result.provider, "url": result.url},
            )
        return valid
