"""DetectedDish entity - one resolved menu item in an analysis result."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from domain.menu.core.entities.korean_food import KoreanFood
from domain.menu.images.entities.image_result import ImageAccuracy, ImageResult


class DishSource(str, Enum):
    """Where the descriptive data of a dish came from."""

    DATABASE = "database"
    AI = "ai"


# Confidence is fully determined by the source
CONFIDENCE_BY_SOURCE: Dict[DishSource, float] = {
    DishSource.DATABASE: 1.0,
    DishSource.AI: 0.8,
}


@dataclass(frozen=True)
class DetectedDish:
    """
    Value-like entity returned for each resolved menu item.

    Build instances through from_store() or from_generated(): the
    constructor rejects a confidence that does not match the source.

    Examples:
        >>> dish = DetectedDish.from_store(food, image=None)
        >>> dish.confidence, dish.source.value
        (1.0, 'database')
    """

    name_korean: str
    name_english: str
    description: str
    confidence: float
    source: DishSource
    description_english: Optional[str] = None
    ingredients: List[str] = field(default_factory=list)
    calories: int = 0
    category: str = ""
    spiciness: int = 0
    allergens: List[str] = field(default_factory=list)
    is_vegetarian: bool = False
    is_vegan: bool = False
    serving_size: str = ""
    cooking_method: str = ""
    region: str = ""
    image_url: Optional[str] = None
    image_accuracy: Optional[ImageAccuracy] = None

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        expected = CONFIDENCE_BY_SOURCE[DishSource(self.source)]
        if self.confidence != expected:
            raise ValueError(
                f"Confidence {self.confidence} does not match source "
                f"'{self.source.value}' (expected {expected})"
            )

        if not 0 <= self.spiciness <= 5:
            raise ValueError(f"Spiciness must be between 0 and 5, got {self.spiciness}")

        if self.image_accuracy is not None and self.image_url is None:
            raise ValueError("image_accuracy requires an image_url")

    @classmethod
    def from_store(cls, food: KoreanFood, image: Optional[ImageResult]) -> "DetectedDish":
        """Dish served from a stored record."""
        return cls._from_food(food, image, DishSource.DATABASE)

    @classmethod
    def from_generated(cls, food: KoreanFood, image: Optional[ImageResult]) -> "DetectedDish":
        """Dish whose record was just synthesized by the generative fallback."""
        return cls._from_food(food, image, DishSource.AI)

    @classmethod
    def _from_food(
        cls,
        food: KoreanFood,
        image: Optional[ImageResult],
        source: DishSource,
    ) -> "DetectedDish":
        if source is DishSource.DATABASE or not food.description_english:
            description_english = f"Traditional Korean {food.name_english}"
        else:
            description_english = food.description_english

        return cls(
            name_korean=food.name_korean,
            name_english=food.name_english,
            description=food.description,
            description_english=description_english,
            confidence=CONFIDENCE_BY_SOURCE[source],
            source=source,
            ingredients=list(food.ingredients),
            calories=food.calories,
            category=food.category,
            spiciness=food.spiciness,
            allergens=list(food.allergens),
            is_vegetarian=food.is_vegetarian,
            is_vegan=food.is_vegan,
            serving_size=food.serving_size,
            cooking_method=food.cooking_method,
            region=food.region,
            image_url=image.url if image else None,
            image_accuracy=image.accuracy if image else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict (snake_case, enum values) for storage."""
        return {
            "name_korean": self.name_korean,
            "name_english": self.name_english,
            "description": self.description,
            "description_english": self.description_english,
            "confidence": self.confidence,
            "source": self.source.value,
            "ingredients": list(self.ingredients),
            "calories": self.calories,
            "category": self.category,
            "spiciness": self.spiciness,
            "allergens": list(self.allergens),
            "is_vegetarian": self.is_vegetarian,
            "is_vegan": self.is_vegan,
            "serving_size": self.serving_size,
            "cooking_method": self.cooking_method,
            "region": self.region,
            "image_url": self.image_url,
            "image_accuracy": self.image_accuracy.value if self.image_accuracy else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectedDish":
        accuracy = data.get("image_accuracy")
        return cls(
            name_korean=data["name_korean"],
            name_english=data["name_english"],
            description=data.get("description", ""),
            description_english=data.get("description_english"),
            confidence=float(data["confidence"]),
            source=DishSource(data["source"]),
            ingredients=list(data.get("ingredients", [])),
            calories=int(data.get("calories", 0)),
            category=data.get("category", ""),
            spiciness=int(data.get("spiciness", 0)),
            allergens=list(data.get("allergens", [])),
            is_vegetarian=bool(data.get("is_vegetarian", False)),
            is_vegan=bool(data.get("is_vegan", False)),
            serving_size=data.get("serving_size", ""),
            cooking_method=data.get("cooking_method", ""),
            region=data.get("region", ""),
            image_url=data.get("image_url"),
            image_accuracy=ImageAccuracy(accuracy) if accuracy else None,
        )
