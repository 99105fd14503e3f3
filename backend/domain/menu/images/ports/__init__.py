"""Image domain ports (interfaces)."""

from domain.menu.images.ports.image_provider import (
    IFallbackImageProvider,
    IImageProvider,
    IImageValidator,
)

__all__ = ["IImageProvider", "IFallbackImageProvider", "IImageValidator"]
