"""Domain ports (interfaces for infrastructure adapters)."""

from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.korean_food_repository import IKoreanFoodRepository
from domain.shared.ports.menu_analysis_repository import IMenuAnalysisRepository
from domain.shared.ports.usage_repository import IUsageRepository

__all__ = [
    "IEventBus",
    "IKoreanFoodRepository",
    "IMenuAnalysisRepository",
    "IUsageRepository",
]
