"""Pexels API client - stock photo IImageProvider adapter."""

from typing import List, Optional, Sequence, Tuple

from domain.menu.images.entities.image_result import ImageAccuracy, ImageCandidate
from domain.menu.images.services.queries import pexels_queries
from domain.menu.images.services.relevance import pick_best, score_stock_photo, stock_accuracy
from infrastructure.images.base import BaseImageClient


class PexelsImageClient(BaseImageClient):
    """
    Pexels photo search implementing IImageProvider port.

    Disabled (search returns None) when no API key is configured.
    """

    NAME = "pexels"
    SEARCH_URL = "https://api.pexels.com/v1/search"
    PAGE_SIZE = 15

    def __init__(self, api_key: Optional[str], timeout_s: float = 5.0) -> None:
        super().__init__(timeout_s=timeout_s)
        self._api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def _default_headers(self) -> dict:
        return {"Authorization": self._api_key or ""}

    def _queries(self, korean_name: str, english_name: str) -> List[str]:
        return pexels_queries(english_name)

    async def _fetch(self, query: str) -> Sequence[ImageCandidate]:
        session = self._require_session()
        response = await session.get(
            self.SEARCH_URL,
            params={"query": query, "per_page": self.PAGE_SIZE, "page": 1},
        )
        response.raise_for_status()

        candidates = []
        for photo in response.json().get("photos") or []:
            url = (photo.get("src") or {}).get("large")
            if not url:
                continue
            candidates.append(
                ImageCandidate(
                    url=url,
                    alt_text=photo.get("alt") or "",
                    photographer=photo.get("photographer") or "",
                )
            )
        return candidates

    def _pick(
        self,
        candidates: Sequence[ImageCandidate],
        english_name: str,
        query: str,
    ) -> Optional[Tuple[ImageCandidate, int]]:
        return pick_best(candidates, lambda c: score_stock_photo(c, english_name))

    def _accuracy(self, candidate: ImageCandidate, score: int) -> ImageAccuracy:
        return stock_accuracy(score)
