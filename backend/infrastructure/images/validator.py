"""HTTP image URL validator - implements IImageValidator port."""

from typing import Any, Optional

import httpx
import structlog

from infrastructure.images.base import BROWSER_USER_AGENT
from metrics.menu_analysis import record_image_validation

logger = structlog.get_logger(__name__)


class HttpImageValidator:
    """
    HEAD probe of a candidate image URL.

    A URL is valid when the server answers 2xx with an image/* content
    type. Timeouts, network errors and any other answer mean invalid.

    Example:
        >>> async with HttpImageValidator() as validator:
        ...     await validator.validate("https://images.pexels.com/photos/1/a.jpg")
        True
    """

    def __init__(self, timeout_s: float = 3.0) -> None:
        self._timeout_s = timeout_s
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpImageValidator":
        """Async context manager entry."""
        self._session = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout_s),
            headers={"User-Agent": BROWSER_USER_AGENT, "Accept": "image/*"},
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        if self._session:
            await self._session.aclose()
            self._session = None

    async def validate(self, url: str) -> bool:
        """
        Check that a URL is live and serves an image.

        Implements IImageValidator.validate() port. Never raises.
        """
        valid = await self._probe(url)
        record_image_validation(valid)
        return valid

    async def _probe(self, url: str) -> bool:
        if not self._session:
            logger.warning("image_validator_not_initialized", url=url)
            return False

        try:
            response = await self._session.head(url)
        except httpx.HTTPError as e:
            logger.info("image_validation_failed", url=url, error=str(e))
            return False

        content_type = response.headers.get("content-type", "")
        if not response.is_success or not content_type.startswith("image/"):
            logger.info(
                "image_rejected",
                url=url,
                status=response.status_code,
                content_type=content_type,
            )
            return False
        return True
