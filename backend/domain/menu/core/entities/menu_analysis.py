"""MenuAnalysis aggregate - persisted result of one menu photo."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from domain.menu.core.entities.detected_dish import DetectedDish
from domain.menu.core.value_objects.image_hash import ImageHash
from domain.menu.core.value_objects.token_usage import TokenUsage


@dataclass(frozen=True)
class MenuAnalysis:
    """
    Aggregate Root: analysis record of a distinct menu photo.

    One record per image hash. Created once, never mutated, and read back
    on every resubmission of the same photo.

    Attributes:
        image_hash: SHA-256 hex digest of the photo bytes
        extracted_food_names: Korean names in extraction order
        detected_dishes: Resolved dishes in extraction order
        is_korean_menu: Whether the photo shows a Korean menu
        token_usage: Cumulative generative model usage
        user_id: Authenticated caller, if any
        session_id: Anonymous session, if any
    """

    image_hash: str
    extracted_food_names: List[str]
    detected_dishes: List[DetectedDish]
    is_korean_menu: bool
    token_usage: TokenUsage = field(default_factory=TokenUsage.zero)
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        ImageHash(self.image_hash)

        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (use UTC)")

        if not self.is_korean_menu and self.detected_dishes:
            raise ValueError("A non-Korean menu cannot carry detected dishes")

    def dish_count(self) -> int:
        return len(self.detected_dishes)
