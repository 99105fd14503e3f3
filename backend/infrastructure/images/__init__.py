"""Image search, validation and proxy adapters."""

from .image_proxy import DomainNotAllowedError, ImageProxy, ProxiedImage
from .naver_client import NaverImageClient
from .pexels_client import PexelsImageClient
from .pixabay_client import PixabayImageClient
from .unsplash_client import UnsplashImageClient
from .validator import HttpImageValidator

__all__ = [
    "NaverImageClient",
    "PexelsImageClient",
    "PixabayImageClient",
    "UnsplashImageClient",
    "HttpImageValidator",
    "ImageProxy",
    "ProxiedImage",
    "DomainNotAllowedError",
]
