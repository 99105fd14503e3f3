"""CQRS Queries for menu domain."""

from .get_recent_analyses import GetRecentAnalysesQuery, GetRecentAnalysesQueryHandler
from .search_korean_foods import (
    GetKoreanFoodQuery,
    GetKoreanFoodQueryHandler,
    SearchKoreanFoodsQuery,
    SearchKoreanFoodsQueryHandler,
)

__all__ = [
    "GetRecentAnalysesQuery",
    "GetRecentAnalysesQueryHandler",
    "SearchKoreanFoodsQuery",
    "SearchKoreanFoodsQueryHandler",
    "GetKoreanFoodQuery",
    "GetKoreanFoodQueryHandler",
]
