"""Menu domain exceptions."""

from .domain_errors import (
    DishResolutionError,
    FoodNotFoundError,
    ImageValidationError,
    InvalidFoodError,
    InvalidImageError,
    MalformedResponseError,
    MenuAnalysisError,
    MenuDomainError,
    ProviderUnavailableError,
    TooManyItemsError,
    UsageLimitExceededError,
)

__all__ = [
    "MenuDomainError",
    "MalformedResponseError",
    "TooManyItemsError",
    "UsageLimitExceededError",
    "MenuAnalysisError",
    "ProviderUnavailableError",
    "ImageValidationError",
    "DishResolutionError",
    "FoodNotFoundError",
    "InvalidFoodError",
    "InvalidImageError",
]
