"""Image proxy fetching remote dish photos on behalf of browsers.

Many Korean image hosts refuse hotlinking, so photos are fetched
server-side from an allow-list of hosts, trying several header profiles
with increasing timeouts.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

import httpx
import structlog

from domain.menu.core.exceptions.domain_errors import ImageValidationError

logger = structlog.get_logger(__name__)

ALLOWED_DOMAINS: Tuple[str, ...] = (
    "blogfiles.naver.net",
    "postfiles.naver.net",
    "phinf.naver.net",
    "blog.naver.com",
    "cafe.naver.com",
    "images.unsplash.com",
    "images.pexels.com",
    "cdn.pixabay.com",
    "i.pinimg.com",
    "pinimg.com",
    "s.pinimg.com",
    "media.pinimg.com",
)

CACHE_CONTROL = "public, max-age=86400, stale-while-revalidate=604800"


@dataclass(frozen=True)
class FetchProfile:
    """Request headers and timeout of one fetch attempt."""

    headers: Dict[str, str]
    timeout_s: float


FETCH_PROFILES: Tuple[FetchProfile, ...] = (
    FetchProfile(
        headers={
            "User-Agent": (
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
            ),
            "Accept": "image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8",
            "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
            "Referer": "https://www.naver.com/",
            "Cache-Control": "no-cache",
        },
        timeout_s=8.0,
    ),
    FetchProfile(
        headers={
            "User-Agent": (
                "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
                "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
            ),
            "Accept": "image/*",
            "Referer": "https://www.google.com/",
        },
        timeout_s=10.0,
    ),
    FetchProfile(
        headers={
            "User-Agent": "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
            "Accept": "*/*",
        },
        timeout_s=12.0,
    ),
)


class DomainNotAllowedError(ValueError):
    """Raised when the requested image host is not on the allow-list."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"Domain not allowed: {hostname}")


@dataclass(frozen=True)
class ProxiedImage:
    content: bytes
    content_type: str
    source_host: str


def is_allowed_host(hostname: str) -> bool:
    """Exact allow-listed host or any subdomain of one."""
    host = hostname.lower()
    return any(host == d or host.endswith("." + d) for d in ALLOWED_DOMAINS)


class ImageProxy:
    """
    Server-side fetch of allow-listed images.

    Example:
        >>> async with ImageProxy() as proxy:
        ...     image = await proxy.fetch("https://blogfiles.naver.net/a.jpg")
        ...     image.content_type
        'image/jpeg'
    """

    def __init__(
        self,
        profiles: Tuple[FetchProfile, ...] = FETCH_PROFILES,
        backoff_s: float = 0.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._profiles = profiles
        self._backoff_s = backoff_s
        self._sleep = sleep
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ImageProxy":
        """Async context manager entry."""
        self._session = httpx.AsyncClient(follow_redirects=True)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Async context manager exit."""
        if self._session:
            await self._session.aclose()
            self._session = None

    async def fetch(self, url: str) -> ProxiedImage:
        """
        Fetch an image, trying each header profile in turn.

        Args:
            url: Absolute image URL

        Returns:
            ProxiedImage

        Raises:
            DomainNotAllowedError: If the host is not allow-listed
            ImageValidationError: If every attempt failed
        """
        if not self._session:
            raise RuntimeError("Proxy not initialized. Use async context manager.")

        hostname = urlparse(url).hostname or ""
        if not hostname or not is_allowed_host(hostname):
            logger.info("proxy_domain_blocked", hostname=hostname)
            raise DomainNotAllowedError(hostname)

        last_error = "no attempt made"
        for index, profile in enumerate(self._profiles):
            try:
                response = await self._session.get(
                    url,
                    headers=profile.headers,
                    timeout=httpx.Timeout(profile.timeout_s),
                )
            except httpx.HTTPError as e:
                last_error = str(e) or type(e).__name__
                logger.warning("proxy_attempt_failed", attempt=index + 1, hostname=hostname, error=last_error)
                if index < len(self._profiles) - 1:
                    await self._sleep(self._backoff_s * (index + 1))
                continue

            if not response.is_success:
                last_error = f"HTTP {response.status_code}"
                logger.warning("proxy_attempt_failed", attempt=index + 1, hostname=hostname, error=last_error)
                continue

            content_type = response.headers.get("content-type") or "image/jpeg"
            if not content_type.startswith("image/"):
                last_error = f"Invalid content type: {content_type}"
                logger.warning("proxy_attempt_failed", attempt=index + 1, hostname=hostname, error=last_error)
                continue

            logger.info("proxy_image_fetched", attempt=index + 1, hostname=hostname)
            return ProxiedImage(
                content=response.content,
                content_type=content_type,
                source_host=hostname,
            )

        logger.error("proxy_all_attempts_failed", hostname=hostname, error=last_error)
        raise ImageValidationError(url, last_error)
