"""MongoDB repository implementations."""

from .base import MongoBaseRepository
from .korean_food_repository import MongoKoreanFoodRepository
from .menu_analysis_repository import MongoMenuAnalysisRepository
from .usage_repository import MongoUsageRepository

__all__ = [
    "MongoBaseRepository",
    "MongoKoreanFoodRepository",
    "MongoMenuAnalysisRepository",
    "MongoUsageRepository",
]
