"""Image search entities."""

from .image_result import ImageAccuracy, ImageCandidate, ImageResult

__all__ = ["ImageAccuracy", "ImageCandidate", "ImageResult"]
