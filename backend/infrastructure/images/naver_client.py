"""Naver image search client - Korean-specialized IImageProvider adapter.

Uses the public image search endpoint, which answers with a JSONP body
(`jsonp({...})`). No API key is needed; the surface can be switched off
with NAVER_IMAGE_SEARCH_ENABLED=false.
"""

import json
import re
from typing import List, Optional, Sequence, Tuple

import structlog

from domain.menu.images.entities.image_result import ImageAccuracy, ImageCandidate
from domain.menu.images.services.queries import korean_queries
from domain.menu.images.services.relevance import (
    is_blocked_url,
    korean_accuracy,
    pick_best,
    score_korean_candidate,
)
from infrastructure.images.base import BROWSER_USER_AGENT, BaseImageClient

logger = structlog.get_logger(__name__)

_JSONP_PATTERN = re.compile(r"jsonp\((\{.*\})\)", re.DOTALL)

MIN_ACCEPTED_SCORE = 0


def parse_jsonp(body: str) -> List[dict]:
    """
    Extract result items from a JSONP search body.

    Returns:
        Items list (empty when the body carries none)

    Raises:
        ValueError: If the body is not a jsonp(...) payload or not JSON
    """
    match = _JSONP_PATTERN.search(body)
    if not match:
        raise ValueError("Response is not a JSONP payload")
    data = json.loads(match.group(1))
    items = data.get("items") or []
    return [item for item in items if isinstance(item, dict)]


class NaverImageClient(BaseImageClient):
    """
    Korean image search implementing IImageProvider port.

    Example:
        >>> async with NaverImageClient() as client:
        ...     image = await client.search("비빔밥", "Bibimbap")
        ...     image.provider
        'naver'
    """

    NAME = "naver"
    SEARCH_URL = "https://s.search.naver.com/p/c/image/search.naver"
    PAGE_SIZE = 20

    def __init__(self, timeout_s: float = 5.0, enabled: bool = True) -> None:
        super().__init__(timeout_s=timeout_s)
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _default_headers(self) -> dict:
        return {
            "User-Agent": BROWSER_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
        }

    def _queries(self, korean_name: str, english_name: str) -> List[str]:
        return korean_queries(korean_name, english_name)

    async def _fetch(self, query: str) -> Sequence[ImageCandidate]:
        session = self._require_session()
        response = await session.get(
            self.SEARCH_URL,
            params={
                "query": query,
                "json_type": 6,
                "display": self.PAGE_SIZE,
                "start": 1,
                "_callback": "jsonp",
            },
        )
        response.raise_for_status()

        candidates = []
        for item in parse_jsonp(response.text):
            url = item.get("originalUrl") or item.get("thumb") or ""
            if not url:
                continue
            candidates.append(
                ImageCandidate(
                    url=url,
                    title=item.get("title") or "",
                    source=item.get("source") or item.get("link") or "",
                )
            )
        return candidates

    def _pick(
        self,
        candidates: Sequence[ImageCandidate],
        english_name: str,
        query: str,
    ) -> Optional[Tuple[ImageCandidate, int]]:
        allowed = [c for c in candidates if not is_blocked_url(c.url)]
        if len(allowed) < len(candidates):
            logger.debug(
                "blocked_hosts_skipped",
                query=query,
                skipped=len(candidates) - len(allowed),
            )

        best = pick_best(allowed, score_korean_candidate)
        if best is None or best[1] < MIN_ACCEPTED_SCORE:
            return None
        return best

    def _accuracy(self, candidate: ImageCandidate, score: int) -> ImageAccuracy:
        return korean_accuracy(candidate.url, score)
