"""Ports (interfaces) for image search providers and URL validation."""

from typing import Optional, Protocol

from domain.menu.images.entities.image_result import ImageResult


class IImageProvider(Protocol):
    """
    Interface for an image search backend.

    Every provider returns zero or one best-scored candidate. A provider
    without its API key is disabled and returns None; one whose every
    request failed raises ProviderUnavailableError. Either way the
    waterfall moves on.

    Implementations:
    - NaverImageClient (Korean-specialized)
    - PexelsImageClient, PixabayImageClient (keyed stock photos)
    - UnsplashImageClient (default stock photos)
    """

    @property
    def name(self) -> str:
        """Provider name reported in ImageResult.provider."""
        ...

    @property
    def enabled(self) -> bool:
        """False when the provider is not configured (e.g. no API key)."""
        ...

    async def search(
        self,
        korean_name: str,
        english_name: str,
        query: Optional[str] = None,
    ) -> Optional[ImageResult]:
        """
        Find the best image for a dish.

        Args:
            korean_name: Dish name in Korean
            english_name: Dish name in English
            query: Single custom query replacing the provider's defaults

        Returns:
            Best ImageResult or None

        Raises:
            ProviderUnavailableError: If the provider could not be reached
        """
        ...


class IFallbackImageProvider(IImageProvider, Protocol):
    """Default provider able to return a generic Korean food photo."""

    async def search_generic(self) -> Optional[ImageResult]:
        """Random pick among the top results of a generic Korean food query."""
        ...


class IImageValidator(Protocol):
    """Interface for the reachability probe run on candidate URLs."""

    async def validate(self, url: str) -> bool:
        """
        Check that a URL is live and serves an image.

        Never raises: any network failure or unexpected response means False.
        """
        ...
