"""Shared plumbing of the image search clients.

Each client owns one httpx.AsyncClient (opened by the async context
manager) and walks its query list from the most specific phrasing to the
most generic one, stopping at the first query whose best candidate is
acceptable. A failing query is logged and skipped; when every query
failed at the network level the provider reports itself unavailable.
"""

from typing import Any, List, Optional, Sequence, Tuple

import httpx
import structlog

from domain.menu.core.exceptions.domain_errors import ProviderUnavailableError
from domain.menu.images.entities.image_result import (
    ImageAccuracy,
    ImageCandidate,
    ImageResult,
)
from metrics.menu_analysis import record_image_search

logger = structlog.get_logger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class BaseImageClient:
    """
    Base class of the IImageProvider adapters.

    Subclasses provide:
    - NAME: provider name reported in ImageResult.provider
    - _queries(): default query list for a dish
    - _fetch(): candidates for one query
    - _pick(): best (candidate, score) among them, or None
    - _accuracy(): accuracy tier of the picked candidate
    """

    NAME = ""

    def __init__(self, timeout_s: float = 5.0) -> None:
        """
        Initialize client.

        Args:
            timeout_s: Timeout of each search request
        """
        self._timeout_s = timeout_s
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "BaseImageClient":
        """Async context manager entry."""
        self._session = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout_s),
            headers=self._default_headers(),
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        if self._session:
            await self._session.aclose()
            self._session = None

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def enabled(self) -> bool:
        return True

    async def search(
        self,
        korean_name: str,
        english_name: str,
        query: Optional[str] = None,
    ) -> Optional[ImageResult]:
        """
        Find the best image for a dish.

        Implements IImageProvider.search() port.

        Args:
            korean_name: Dish name in Korean
            english_name: Dish name in English
            query: Single custom query replacing the default list

        Returns:
            Best ImageResult of the first productive query, or None

        Raises:
            ProviderUnavailableError: If every query failed
        """
        if not self.enabled:
            logger.info("image_provider_disabled", provider=self.name)
            record_image_search(self.name, "disabled")
            return None

        queries = [query] if query else self._queries(korean_name, english_name)
        errors = 0
        last_error = ""

        for q in queries:
            try:
                candidates = await self._fetch(q)
            except (httpx.HTTPError, ValueError) as e:
                errors += 1
                last_error = str(e) or type(e).__name__
                logger.warning(
                    "image_query_failed",
                    provider=self.name,
                    query=q,
                    error=str(e),
                )
                continue

            picked = self._pick(candidates, english_name, q)
            if picked is None:
                continue

            candidate, score = picked
            logger.info(
                "image_found",
                provider=self.name,
                query=q,
                score=score,
                url=candidate.url,
            )
            record_image_search(self.name, "hit")
            return ImageResult(
                url=candidate.url,
                provider=self.name,
                relevance_score=score,
                accuracy=self._accuracy(candidate, score),
                query=q,
                title=candidate.title or candidate.alt_text or candidate.tags or None,
            )

        if queries and errors == len(queries):
            record_image_search(self.name, "error")
            raise ProviderUnavailableError(self.name, last_error)

        logger.info("image_not_found", provider=self.name, korean_name=korean_name)
        record_image_search(self.name, "miss")
        return None

    def _require_session(self) -> httpx.AsyncClient:
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._session

    def _default_headers(self) -> dict:
        return {}

    def _queries(self, korean_name: str, english_name: str) -> List[str]:
        raise NotImplementedError

    async def _fetch(self, query: str) -> Sequence[ImageCandidate]:
        raise NotImplementedError

    def _pick(
        self,
        candidates: Sequence[ImageCandidate],
        english_name: str,
        query: str,
    ) -> Optional[Tuple[ImageCandidate, int]]:
        raise NotImplementedError

    def _accuracy(self, candidate: ImageCandidate, score: int) -> ImageAccuracy:
        raise NotImplementedError
