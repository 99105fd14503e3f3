"""Pydantic request/response models of the REST API.

Field names are camelCase on the wire; token usage keeps its
snake_case keys, which clients already rely on.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from domain.menu.core.entities.detected_dish import DetectedDish
from domain.menu.core.entities.korean_food import KoreanFood
from domain.menu.core.entities.menu_analysis import MenuAnalysis
from domain.menu.core.value_objects.token_usage import TokenUsage


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenUsageResponse(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    cost_usd: float
    cost_aud: float

    @classmethod
    def from_domain(cls, usage: TokenUsage) -> "TokenUsageResponse":
        return cls(**usage.to_dict())


class DishResponse(CamelModel):
    name_korean: str
    name_english: str
    description: str
    description_english: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    calories: int = 0
    confidence: float
    image_url: Optional[str] = None
    image_accuracy: Optional[str] = None
    category: str = ""
    spiciness: int = 0
    allergens: List[str] = Field(default_factory=list)
    is_vegetarian: bool = False
    is_vegan: bool = False
    serving_size: str = ""
    cooking_method: str = ""
    region: str = ""
    source: str

    @classmethod
    def from_domain(cls, dish: DetectedDish) -> "DishResponse":
        return cls(**dish.to_dict())


class AnalyzeMenuJsonRequest(CamelModel):
    """JSON alternative to the multipart upload."""

    image_base64: str = Field(..., min_length=1)


class AnalyzeMenuResponse(CamelModel):
    id: str
    is_korean_menu: bool
    dishes: List[DishResponse]
    extracted_food_names: List[str]
    message: str
    token_usage: TokenUsageResponse
    cached: bool = False
    cache_date: Optional[datetime] = None


class MenuAnalysisResponse(CamelModel):
    id: str
    image_hash: str
    is_korean_menu: bool
    extracted_food_names: List[str]
    dishes: List[DishResponse]
    token_usage: TokenUsageResponse
    created_at: datetime

    @classmethod
    def from_domain(cls, analysis: MenuAnalysis) -> "MenuAnalysisResponse":
        return cls(
            id=analysis.id,
            image_hash=analysis.image_hash,
            is_korean_menu=analysis.is_korean_menu,
            extracted_food_names=list(analysis.extracted_food_names),
            dishes=[DishResponse.from_domain(d) for d in analysis.detected_dishes],
            token_usage=TokenUsageResponse.from_domain(analysis.token_usage),
            created_at=analysis.created_at,
        )


class KoreanFoodResponse(CamelModel):
    id: str
    name_korean: str
    name_english: str
    description: str
    description_english: Optional[str] = None
    ingredients: List[str]
    calories: int
    category: str
    spiciness: int
    allergens: List[str]
    is_vegetarian: bool
    is_vegan: bool
    serving_size: str
    cooking_method: str
    region: str
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, food: KoreanFood) -> "KoreanFoodResponse":
        return cls(
            id=food.id,
            name_korean=food.name_korean,
            name_english=food.name_english,
            description=food.description,
            description_english=food.description_english,
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
            image_url=food.image_url,
            created_at=food.created_at,
            updated_at=food.updated_at,
        )


# Food fields a PATCH may clear by sending null
NULLABLE_FOOD_FIELDS = frozenset({"description_english", "image_url"})


class KoreanFoodUpdateRequest(CamelModel):
    """Partial edit of a food record; only the fields sent are changed."""

    name_english: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    description_english: Optional[str] = None
    ingredients: Optional[List[str]] = None
    calories: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None
    spiciness: Optional[int] = Field(default=None, ge=0, le=5)
    allergens: Optional[List[str]] = None
    is_vegetarian: Optional[bool] = None
    is_vegan: Optional[bool] = None
    serving_size: Optional[str] = None
    cooking_method: Optional[str] = None
    region: Optional[str] = None
    image_url: Optional[str] = None

    @model_validator(mode="after")
    def _reject_null_required_fields(self) -> "KoreanFoodUpdateRequest":
        nulled = sorted(
            name
            for name in self.model_fields_set - NULLABLE_FOOD_FIELDS
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields cannot be null: {nulled}")
        return self

    def to_changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, ready for KoreanFood.with_changes."""
        return self.model_dump(exclude_unset=True)
