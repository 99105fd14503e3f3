"""Domain exceptions for the Menu bounded context.

This module defines the exception hierarchy for menu analysis errors.
All domain exceptions inherit from MenuDomainError.

Only TooManyItemsError, UsageLimitExceededError and MenuAnalysisError are
meant to reach the HTTP client. Everything else degrades gracefully inside
the pipeline (fewer dishes, lower-accuracy images or no image at all).
"""

from typing import Optional


class MenuDomainError(Exception):
    """Base exception for menu domain.

    Allows the application layer to catch every menu domain error uniformly.
    """

    pass


# ============================================
# Generative model boundary
# ============================================


class MalformedResponseError(MenuDomainError):
    """Raised when a generative model returns empty or unparseable content.

    Fatal to the single model call that produced it.
    """

    pass


# ============================================
# Request-level rejections (user facing)
# ============================================


class TooManyItemsError(MenuDomainError):
    """Raised when a menu photo shows more items than one analysis allows.

    Product constraint: the request is rejected instead of silently
    truncating the dish list, so the client can ask for a tighter photo.

    Attributes:
        detected_count: Number of items visible on the menu
        limit: Maximum number of items allowed per analysis
    """

    def __init__(self, detected_count: int, limit: int = 3):
        self.detected_count = detected_count
        self.limit = limit
        super().__init__(
            f"Too many menu items detected ({detected_count} items found). "
            f"Please upload a photo with {limit} or fewer menu items for analysis."
        )


class UsageLimitExceededError(MenuDomainError):
    """Raised when the free tier has been consumed.

    Attributes:
        usage_count: Analyses already performed by the user or session
        limit: Free tier size
        requires_auth: Anonymous caller, must sign in to continue
        requires_payment: Signed-in caller without premium status
    """

    def __init__(
        self,
        usage_count: int,
        limit: int,
        requires_auth: bool = False,
        requires_payment: bool = False,
    ):
        self.usage_count = usage_count
        self.limit = limit
        self.requires_auth = requires_auth
        self.requires_payment = requires_payment
        if requires_auth:
            message = (
                f"Free trial limit reached ({limit} uploads). "
                "Please sign in to continue."
            )
        else:
            message = (
                f"Free trial limit reached ({limit} uploads). "
                "Please upgrade to premium for unlimited access."
            )
        super().__init__(message)


class InvalidImageError(MenuDomainError):
    """Raised when the uploaded photo payload cannot be decoded."""

    pass


class MenuAnalysisError(MenuDomainError):
    """Raised when the analysis of a menu failed entirely."""

    def __init__(self, message: str = "Failed to analyze menu"):
        super().__init__(message)


# ============================================
# Degradable failures (logged, never user facing)
# ============================================


class ProviderUnavailableError(MenuDomainError):
    """Raised when an image or text provider cannot be used.

    Missing API key or network failure. Triggers the next provider.
    """

    def __init__(self, provider: str, reason: Optional[str] = None):
        self.provider = provider
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Provider '{provider}' unavailable{detail}")


class ImageValidationError(MenuDomainError):
    """Raised when a candidate image URL is unreachable or not an image."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Image validation failed for {url}{detail}")


class DishResolutionError(MenuDomainError):
    """Raised when a single dish name could not be resolved.

    Non-fatal to the batch: the orchestrator logs and skips the dish.
    """

    def __init__(self, korean_name: str, reason: Optional[str] = None):
        self.korean_name = korean_name
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to resolve dish '{korean_name}'{detail}")


# ============================================
# Food catalogue
# ============================================


class FoodNotFoundError(MenuDomainError):
    """Raised when a stored food record does not exist."""

    pass


class InvalidFoodError(MenuDomainError):
    """Raised when food record invariants are violated.

    Examples:
    - Empty Korean name
    - Spiciness outside 0-5
    - Negative calories
    """

    pass
