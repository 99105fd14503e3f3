"""Pixabay API client - tagged stock photo IImageProvider adapter."""

from typing import List, Optional, Sequence, Tuple

from domain.menu.images.entities.image_result import ImageAccuracy, ImageCandidate
from domain.menu.images.services.queries import pixabay_queries
from domain.menu.images.services.relevance import pick_best, score_tagged_photo, stock_accuracy
from infrastructure.images.base import BaseImageClient


class PixabayImageClient(BaseImageClient):
    """
    Pixabay photo search implementing IImageProvider port.

    Restricted to the food category with safe search on. Disabled when no
    API key is configured.
    """

    NAME = "pixabay"
    SEARCH_URL = "https://pixabay.com/api/"
    PAGE_SIZE = 15

    def __init__(self, api_key: Optional[str], timeout_s: float = 5.0) -> None:
        super().__init__(timeout_s=timeout_s)
        self._api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def _queries(self, korean_name: str, english_name: str) -> List[str]:
        return pixabay_queries(english_name)

    async def _fetch(self, query: str) -> Sequence[ImageCandidate]:
        session = self._require_session()
        response = await session.get(
            self.SEARCH_URL,
            params={
                "key": self._api_key,
                "q": query,
                "image_type": "photo",
                "category": "food",
                "per_page": self.PAGE_SIZE,
                "safesearch": "true",
            },
        )
        response.raise_for_status()

        candidates = []
        for hit in response.json().get("hits") or []:
            url = hit.get("largeImageURL") or hit.get("webformatURL")
            if not url:
                continue
            candidates.append(
                ImageCandidate(
                    url=url,
                    tags=hit.get("tags") or "",
                    photographer=hit.get("user") or "",
                )
            )
        return candidates

    def _pick(
        self,
        candidates: Sequence[ImageCandidate],
        english_name: str,
        query: str,
    ) -> Optional[Tuple[ImageCandidate, int]]:
        return pick_best(candidates, lambda c: score_tagged_photo(c, english_name))

    def _accuracy(self, candidate: ImageCandidate, score: int) -> ImageAccuracy:
        return stock_accuracy(score)
