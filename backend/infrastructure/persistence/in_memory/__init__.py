"""In-memory persistence implementations."""

from infrastructure.persistence.in_memory.korean_food_repository import (
    InMemoryKoreanFoodRepository,
)
from infrastructure.persistence.in_memory.menu_analysis_repository import (
    InMemoryMenuAnalysisRepository,
)
from infrastructure.persistence.in_memory.usage_repository import (
    InMemoryUsageRepository,
)

__all__ = [
    "InMemoryKoreanFoodRepository",
    "InMemoryMenuAnalysisRepository",
    "InMemoryUsageRepository",
]
