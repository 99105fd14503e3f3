"""CQRS Commands for menu domain."""

from .analyze_menu import (
    AnalyzeMenuCommand,
    AnalyzeMenuCommandHandler,
    AnalyzeMenuResult,
)
from .update_korean_food import (
    UpdateKoreanFoodCommand,
    UpdateKoreanFoodCommandHandler,
)

__all__ = [
    "AnalyzeMenuCommand",
    "AnalyzeMenuCommandHandler",
    "AnalyzeMenuResult",
    "UpdateKoreanFoodCommand",
    "UpdateKoreanFoodCommandHandler",
]
