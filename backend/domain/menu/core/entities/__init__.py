"""Core entities for menu domain."""

from .detected_dish import DetectedDish, DishSource
from .korean_food import KoreanFood, KoreanFoodDraft
from .menu_analysis import MenuAnalysis
from .user_account import UserAccount

__all__ = [
    "DetectedDish",
    "DishSource",
    "KoreanFood",
    "KoreanFoodDraft",
    "MenuAnalysis",
    "UserAccount",
]
