"""Stub menu providers for testing.

Return fixed OCR results and dish records without calling external APIs.
Useful for integration/E2E tests and for running the service without keys.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from domain.menu.core.entities.korean_food import KoreanFoodDraft
from domain.menu.core.value_objects.token_usage import TokenUsage
from domain.menu.ocr.entities.menu_extraction import MenuExtraction

DEFAULT_STUB_NAMES = ("비빔밥", "김치찌개")

_STUB_DISHES: Dict[str, KoreanFoodDraft] = {
    "비빔밥": KoreanFoodDraft(
        name_korean="비빔밥",
        name_english="Bibimbap",
        description="Rice topped with seasoned vegetables, beef, egg and gochujang",
        ingredients=["rice", "spinach", "bean sprouts", "beef", "egg", "gochujang"],
        calories=420,
        category="Main Dish",
        spiciness=2,
        allergens=["egg", "soy"],
        serving_size="1 bowl",
        cooking_method="Mixed",
        region="Jeonju",
    ),
    "김치찌개": KoreanFoodDraft(
        name_korean="김치찌개",
        name_english="Kimchi Jjigae",
        description="Spicy stew of aged kimchi, pork and tofu",
        ingredients=["kimchi", "pork", "tofu", "green onion", "gochugaru"],
        calories=350,
        category="Soup",
        spiciness=3,
        allergens=["soy"],
        serving_size="1 pot",
        cooking_method="Stewed",
        region="Nationwide",
    ),
}


class StubMenuTextExtractor:
    """
    Stub implementation of IMenuTextExtractor.

    Every photo reads as a Korean menu listing the configured names.
    Supports async context manager protocol for lifespan compatibility.
    """

    def __init__(
        self,
        names: Sequence[str] = DEFAULT_STUB_NAMES,
        is_korean_menu: bool = True,
        total_detected: Optional[int] = None,
    ):
        self._names: List[str] = list(names)
        self._is_korean_menu = is_korean_menu
        self._total_detected = total_detected

    async def __aenter__(self) -> "StubMenuTextExtractor":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        return None

    async def extract_names(self, image_base64: str) -> MenuExtraction:
        return MenuExtraction(
            is_korean_menu=self._is_korean_menu,
            extracted_names=list(self._names) if self._is_korean_menu else [],
            total_detected=self._total_detected,
            token_usage=TokenUsage.zero(),
        )


class StubDishDetailGenerator:
    """
    Stub implementation of IDishDetailGenerator.

    Known dishes come from a small fixed table; anything else gets a
    minimal placeholder record.
    """

    async def __aenter__(self) -> "StubDishDetailGenerator":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        return None

    async def synthesize(self, korean_name: str) -> KoreanFoodDraft:
        known = _STUB_DISHES.get(korean_name)
        if known is not None:
            return replace(known)

        return KoreanFoodDraft(
            name_korean=korean_name,
            name_english=f"Korean Dish ({korean_name})",
            description="Traditional Korean dish",
            category="Main Dish",
        )
