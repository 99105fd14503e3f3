"""Core value objects for menu domain.

Immutable value objects (frozen dataclasses with value-based equality).
"""

from .image_hash import ImageHash
from .token_usage import CostModel, TokenUsage

__all__ = [
    "CostModel",
    "ImageHash",
    "TokenUsage",
]
