"""Image adapter factory.

Builds every image client from AppConfig. The clients hold HTTP
sessions: enter them with `open_image_clients()` (or one by one with
`async with`) before building the waterfall.

Usage:
    async with open_image_clients(config) as clients:
        waterfall = build_waterfall(clients, config)
"""

from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from domain.menu.images.services.image_waterfall import ImageResolutionWaterfall
from infrastructure.config import AppConfig
from infrastructure.images.image_proxy import ImageProxy
from infrastructure.images.naver_client import NaverImageClient
from infrastructure.images.pexels_client import PexelsImageClient
from infrastructure.images.pixabay_client import PixabayImageClient
from infrastructure.images.unsplash_client import UnsplashImageClient
from infrastructure.images.validator import HttpImageValidator


@dataclass(frozen=True)
class ImageClients:
    naver: NaverImageClient
    pexels: PexelsImageClient
    pixabay: PixabayImageClient
    unsplash: UnsplashImageClient
    validator: HttpImageValidator
    proxy: ImageProxy


def create_image_clients(config: AppConfig) -> ImageClients:
    """Instantiate (but do not open) every image adapter."""
    timeout = config.image_search_timeout_s
    return ImageClients(
        naver=NaverImageClient(timeout_s=timeout, enabled=config.naver_search_enabled),
        pexels=PexelsImageClient(api_key=config.pexels_api_key, timeout_s=timeout),
        pixabay=PixabayImageClient(api_key=config.pixabay_api_key, timeout_s=timeout),
        unsplash=UnsplashImageClient(access_key=config.unsplash_access_key, timeout_s=timeout),
        validator=HttpImageValidator(timeout_s=config.image_validation_timeout_s),
        proxy=ImageProxy(),
    )


@asynccontextmanager
async def open_image_clients(config: AppConfig) -> AsyncIterator[ImageClients]:
    """Create image adapters and keep their HTTP sessions open for the block."""
    clients = create_image_clients(config)
    async with AsyncExitStack() as stack:
        for client in (
            clients.naver,
            clients.pexels,
            clients.pixabay,
            clients.unsplash,
            clients.validator,
            clients.proxy,
        ):
            await stack.enter_async_context(client)
        yield clients


def build_waterfall(clients: ImageClients, config: AppConfig) -> ImageResolutionWaterfall:
    """Waterfall order: Naver, then Pexels and Pixabay, Unsplash as fallback."""
    return ImageResolutionWaterfall(
        korean_provider=clients.naver,
        stock_providers=[clients.pexels, clients.pixabay],
        validator=clients.validator,
        fallback_provider=clients.unsplash,
        max_alternate_queries=config.max_alternate_queries,
    )
