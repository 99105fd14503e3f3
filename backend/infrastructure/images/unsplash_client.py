"""Unsplash API client - default IFallbackImageProvider adapter.

Dish names are mapped to broader ingredient or dish-type terms before
searching: Unsplash has few photos of specific Korean dishes.
"""

import random
from typing import List, Optional, Sequence, Tuple

import httpx
import structlog

from domain.menu.core.exceptions.domain_errors import ProviderUnavailableError
from domain.menu.images.entities.image_result import (
    ImageAccuracy,
    ImageCandidate,
    ImageResult,
)
from domain.menu.images.services.queries import GENERIC_FALLBACK_QUERY, default_queries
from domain.menu.images.services.relevance import (
    default_accuracy,
    pick_best,
    score_default_photo,
)
from infrastructure.images.base import BaseImageClient
from metrics.menu_analysis import record_image_search

logger = structlog.get_logger(__name__)


class UnsplashImageClient(BaseImageClient):
    """
    Unsplash photo search implementing IFallbackImageProvider port.

    Example:
        >>> async with UnsplashImageClient(access_key="...") as client:
        ...     image = await client.search("오징어볶음", "Spicy Stir-fried Squid")
        ...     image.query
        'korean squid dish'
    """

    NAME = "unsplash"
    SEARCH_URL = "https://api.unsplash.com/search/photos"
    PAGE_SIZE = 15
    GENERIC_PAGE_SIZE = 10
    GENERIC_TOP_N = 5

    def __init__(
        self,
        access_key: Optional[str],
        timeout_s: float = 5.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(timeout_s=timeout_s)
        self._access_key = access_key
        self._rng = rng or random.Random()

    @property
    def enabled(self) -> bool:
        return bool(self._access_key)

    def _default_headers(self) -> dict:
        return {"Authorization": f"Client-ID {self._access_key or ''}"}

    def _queries(self, korean_name: str, english_name: str) -> List[str]:
        return default_queries(english_name)

    async def _fetch(self, query: str) -> Sequence[ImageCandidate]:
        return await self._search_photos(
            {
                "query": query,
                "per_page": self.PAGE_SIZE,
                "orientation": "landscape",
                "content_filter": "high",
                "order_by": "relevant",
            }
        )

    def _pick(
        self,
        candidates: Sequence[ImageCandidate],
        english_name: str,
        query: str,
    ) -> Optional[Tuple[ImageCandidate, int]]:
        return pick_best(candidates, lambda c: score_default_photo(c, query))

    def _accuracy(self, candidate: ImageCandidate, score: int) -> ImageAccuracy:
        return default_accuracy(score)

    async def search_generic(self) -> Optional[ImageResult]:
        """
        Random generic Korean food photo.

        Implements IFallbackImageProvider.search_generic() port. Picks at
        random among the top results; always labelled low accuracy.

        Raises:
            ProviderUnavailableError: If the search request failed
        """
        if not self.enabled:
            record_image_search(self.name, "disabled")
            return None

        try:
            candidates = await self._search_photos(
                {
                    "query": GENERIC_FALLBACK_QUERY,
                    "per_page": self.GENERIC_PAGE_SIZE,
                    "orientation": "landscape",
                    "content_filter": "high",
                }
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("generic_image_search_failed", provider=self.name, error=str(e))
            record_image_search(self.name, "error")
            raise ProviderUnavailableError(self.name, str(e)) from e

        if not candidates:
            record_image_search(self.name, "miss")
            return None

        candidate = self._rng.choice(list(candidates[: self.GENERIC_TOP_N]))
        record_image_search(self.name, "hit")
        return ImageResult(
            url=candidate.url,
            provider=self.name,
            relevance_score=0,
            accuracy=ImageAccuracy.LOW,
            query=GENERIC_FALLBACK_QUERY,
            title=candidate.alt_text or None,
        )

    async def _search_photos(self, params: dict) -> List[ImageCandidate]:
        session = self._require_session()
        response = await session.get(self.SEARCH_URL, params=params)
        response.raise_for_status()

        candidates = []
        for photo in response.json().get("results") or []:
            url = (photo.get("urls") or {}).get("regular")
            if not url:
                continue
            candidates.append(
                ImageCandidate(
                    url=url,
                    alt_text=photo.get("alt_description") or "",
                    description=photo.get("description") or "",
                    photographer=(photo.get("user") or {}).get("name") or "",
                )
            )
        return candidates
