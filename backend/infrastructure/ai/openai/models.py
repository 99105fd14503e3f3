"""Pydantic models for OpenAI structured outputs.

These models define the response schemas of the menu OCR and dish
detail calls. Used with beta.chat.completions.parse(): any output that
does not match is rejected, never guessed.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

DishCategory = Literal["Main Dish", "Soup", "Side Dish", "Dessert", "Beverage"]


class MenuExtractionResponse(BaseModel):
    """
    Response of the menu OCR call.

    Maps to domain entity MenuExtraction.
    """

    is_korean_menu: bool = Field(
        ...,
        description="Whether the image is a Korean restaurant menu",
    )
    extracted_names: List[str] = Field(
        default_factory=list,
        description="Exact Korean food names as written on the menu (max 3)",
    )
    total_detected: Optional[int] = Field(
        default=None,
        ge=0,
        description="Total number of food items visible, even if only 3 are returned",
    )


class DishDetailsResponse(BaseModel):
    """
    Response of the dish detail generation call.

    Maps to domain entity KoreanFoodDraft.
    """

    name_korean: str = Field(..., description="Exact Korean dish name")
    name_english: str = Field(..., min_length=1, description="English dish name")
    description: str = Field(..., description="English description (no Korean words)")
    description_english: str = Field(default="", description="English description")
    ingredients: List[str] = Field(
        default_factory=list,
        description="Main ingredients in English (max 6)",
    )
    calories: int = Field(default=0, ge=0, description="Calories per serving")
    category: DishCategory = Field(..., description="Dish category")
    spiciness: int = Field(default=0, ge=0, le=5, description="Spice level 0-5")
    allergens: List[str] = Field(default_factory=list, description="Allergens in English")
    is_vegetarian: bool = Field(default=False)
    is_vegan: bool = Field(default=False)
    serving_size: str = Field(default="", description="Standard serving size")
    cooking_method: str = Field(default="", description="Cooking method")
    region: str = Field(default="", description="Region of origin")
