"""MenuAnalyzed domain event."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from .base import DomainEvent


@dataclass(frozen=True)
class MenuAnalyzed(DomainEvent):
    """Domain event: a menu photo has been analyzed.

    Raised for fresh analyses and for cache hits (cached=True), so
    subscribers can count every served request.

    Attributes:
        analysis_id: ID of the MenuAnalysis record.
        image_hash: Content hash of the photo.
        is_korean_menu: Whether the photo showed a Korean menu.
        dish_count: Number of dishes returned.
        generated_count: Dishes whose record was synthesized in this request.
        cost_usd: Generative cost of the analysis.
        cached: True when served from an earlier analysis.
        user_id: Authenticated caller, if any.

    Examples:
        >>> event = MenuAnalyzed.create(
        ...     analysis_id="a-1",
        ...     image_hash="0" * 64,
        ...     is_korean_menu=True,
        ...     dish_count=2,
        ...     generated_count=1,
        ...     cost_usd=0.01,
        ... )
        >>> event.cached
        False
    """

    analysis_id: str
    image_hash: str
    is_korean_menu: bool
    dish_count: int
    generated_count: int
    cost_usd: float
    cached: bool = False
    user_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        analysis_id: str,
        image_hash: str,
        is_korean_menu: bool,
        dish_count: int,
        generated_count: int,
        cost_usd: float,
        cached: bool = False,
        user_id: Optional[str] = None,
    ) -> "MenuAnalyzed":
        """Create new MenuAnalyzed event.

        Raises:
            ValueError: If counts are negative or generated_count > dish_count.
        """
        if dish_count < 0 or generated_count < 0:
            raise ValueError("Dish counts cannot be negative")

        if generated_count > dish_count:
            raise ValueError(
                f"generated_count ({generated_count}) cannot exceed dish_count ({dish_count})"
            )

        return cls(
            event_id=uuid4(),
            occurred_at=datetime.now(timezone.utc),
            analysis_id=analysis_id,
            image_hash=image_hash,
            is_korean_menu=is_korean_menu,
            dish_count=dish_count,
            generated_count=generated_count,
            cost_usd=cost_usd,
            cached=cached,
            user_id=user_id,
        )
