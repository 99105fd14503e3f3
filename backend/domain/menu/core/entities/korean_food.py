"""KoreanFood entity - stored food record keyed by Korean name."""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from domain.menu.core.exceptions.domain_errors import InvalidFoodError

SPICINESS_MIN = 0
SPICINESS_MAX = 5

# Fields that identify a record and can never be edited
_IMMUTABLE_FIELDS = frozenset({"id", "name_korean", "created_at"})


@dataclass
class KoreanFoodDraft:
    """
    Descriptive attributes of a Korean dish, not yet persisted.

    Produced by the generative fallback and by seed data. Confidence,
    source and image accuracy are not part of the record: they are
    derived when a dish is served.
    """

    name_korean: str
    name_english: str
    description: str = ""
    description_english: Optional[str] = None
    ingredients: List[str] = field(default_factory=list)
    calories: int = 0
    category: str = ""
    spiciness: int = 0  # 0 (none) - 5 (very hot)
    allergens: List[str] = field(default_factory=list)
    is_vegetarian: bool = False
    is_vegan: bool = False
    serving_size: str = ""
    cooking_method: str = ""
    region: str = ""

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        if not self.name_korean or not self.name_korean.strip():
            raise InvalidFoodError("name_korean cannot be empty")

        if not isinstance(self.name_english, str) or not self.name_english.strip():
            raise InvalidFoodError("name_english must be a non-empty string")

        for name in ("spiciness", "calories"):
            value = getattr(self, name)
            # bool is an int subclass
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidFoodError(f"{name} must be an integer, got {value!r}")

        if not SPICINESS_MIN <= self.spiciness <= SPICINESS_MAX:
            raise InvalidFoodError(
                f"Spiciness must be between {SPICINESS_MIN} and {SPICINESS_MAX}, "
                f"got {self.spiciness}"
            )

        if self.calories < 0:
            raise InvalidFoodError(f"Calories cannot be negative, got {self.calories}")

        if self.is_vegan and not self.is_vegetarian:
            # vegan implies vegetarian
            self.is_vegetarian = True


@dataclass
class KoreanFood(KoreanFoodDraft):
    """
    Entity: Korean dish record in the food store.

    Identity: Unique ID, with at most one record per Korean name.
    Lifecycle: Created on first generative resolution of a name (or seeded),
    updated only through explicit edits, never deleted by the pipeline.
    """

    id: str = field(default_factory=lambda: str(uuid4()))
    image_url: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.created_at.tzinfo is None or self.updated_at.tzinfo is None:
            raise InvalidFoodError("timestamps must be timezone-aware (use UTC)")

    @classmethod
    def from_draft(cls, draft: KoreanFoodDraft, image_url: Optional[str] = None) -> "KoreanFood":
        """
        Build a new record from a draft.

        Args:
            draft: Descriptive attributes (generated or seeded)
            image_url: Resolved image URL to store with the record

        Returns:
            New KoreanFood with fresh id and timestamps
        """
        values = {f.name: getattr(draft, f.name) for f in fields(KoreanFoodDraft)}
        return cls(**values, image_url=image_url)

    def with_changes(self, changes: Dict[str, Any]) -> "KoreanFood":
        """
        Return a copy with the given attributes edited.

        Args:
            changes: Partial record (unknown keys are rejected)

        Returns:
            New KoreanFood with updated_at refreshed

        Raises:
            InvalidFoodError: If a key is unknown or immutable, or the
                resulting record violates an invariant
        """
        editable = {f.name for f in fields(self)} - _IMMUTABLE_FIELDS - {"updated_at"}
        unknown = set(changes) - editable
        if unknown:
            raise InvalidFoodError(f"Fields cannot be edited: {sorted(unknown)}")

        return replace(self, **changes, updated_at=datetime.now(timezone.utc))
