"""Seed the food catalogue with common Korean dishes.

Seeded names are served from the store (source "database") without a
generative call. Existing records are left untouched.

Usage:
    uv run python scripts/seed_korean_foods.py

Environment Variables:
    REPOSITORY_BACKEND: "mongodb" to seed a real database (default: inmemory)
    MONGODB_URI: MongoDB connection string (when REPOSITORY_BACKEND=mongodb)
"""

import asyncio
import sys
from pathlib import Path
from typing import List

import structlog
from dotenv import load_dotenv

from domain.menu.core.entities.korean_food import KoreanFood, KoreanFoodDraft
from domain.shared.ports.korean_food_repository import IKoreanFoodRepository
from infrastructure.persistence.factory import create_repositories

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

logger = structlog.get_logger(__name__)

SEED_FOODS: List[KoreanFoodDraft] = [
    KoreanFoodDraft(
        name_korean="비빔밥",
        name_english="Bibimbap",
        description="Rice topped with seasoned vegetables, beef, egg and gochujang",
        description_english="Mixed rice bowl with vegetables and chili paste",
        ingredients=["rice", "spinach", "bean sprouts", "beef", "egg", "gochujang"],
        calories=420,
        category="Main Dish",
        spiciness=2,
        allergens=["egg", "soy", "sesame"],
        serving_size="1 bowl (400g)",
        cooking_method="Mixed",
        region="Jeonju",
    ),
    KoreanFoodDraft(
        name_korean="김치찌개",
        name_english="Kimchi Jjigae",
        description="Stew of aged kimchi, pork and tofu",
        description_english="Spicy kimchi stew",
        ingredients=["kimchi", "pork", "tofu", "green onion", "gochugaru"],
        calories=350,
        category="Soup",
        spiciness=3,
        allergens=["soy"],
        serving_size="1 bowl (450g)",
        cooking_method="Stewed",
    ),
    KoreanFoodDraft(
        name_korean="불고기",
        name_english="Bulgogi",
        description="Thin slices of marinated beef grilled with onion",
        description_english="Sweet soy-marinated grilled beef",
        ingredients=["beef", "soy sauce", "pear", "garlic", "onion", "sesame oil"],
        calories=480,
        category="Main Dish",
        spiciness=0,
        allergens=["soy", "sesame", "wheat"],
        serving_size="1 plate (250g)",
        cooking_method="Grilled",
    ),
    KoreanFoodDraft(
        name_korean="떡볶이",
        name_english="Tteokbokki",
        description="Rice cakes simmered in sweet and spicy gochujang sauce",
        description_english="Spicy stir-fried rice cakes",
        ingredients=["rice cake", "fish cake", "gochujang", "green onion"],
        calories=380,
        category="Snack",
        spiciness=3,
        allergens=["wheat", "fish", "soy"],
        serving_size="1 plate (300g)",
        cooking_method="Simmered",
    ),
    KoreanFoodDraft(
        name_korean="된장찌개",
        name_english="Doenjang Jjigae",
        description="Soybean paste stew with tofu, zucchini and mushrooms",
        description_english="Fermented soybean paste stew",
        ingredients=["doenjang", "tofu", "zucchini", "mushroom", "onion"],
        calories=220,
        category="Soup",
        spiciness=1,
        allergens=["soy"],
        is_vegetarian=True,
        serving_size="1 bowl (450g)",
        cooking_method="Stewed",
    ),
    KoreanFoodDraft(
        name_korean="냉면",
        name_english="Naengmyeon",
        description="Buckwheat noodles in chilled beef broth",
        description_english="Cold buckwheat noodles",
        ingredients=["buckwheat noodles", "beef broth", "cucumber", "pear", "egg"],
        calories=450,
        category="Noodles",
        spiciness=0,
        allergens=["buckwheat", "egg", "wheat"],
        serving_size="1 bowl (550g)",
        cooking_method="Boiled",
        region="Pyongyang",
    ),
]


async def seed(repository: IKoreanFoodRepository) -> int:
    """Insert missing seed foods.

    Returns:
        Number of records created
    """
    created = 0
    for draft in SEED_FOODS:
        if await repository.find_by_korean_name(draft.name_korean) is not None:
            logger.info("seed_skipped", name_korean=draft.name_korean)
            continue
        await repository.create(KoreanFood.from_draft(draft))
        created += 1
        logger.info("seed_created", name_korean=draft.name_korean)
    return created


async def main_async() -> int:
    repositories = create_repositories()
    try:
        created = await seed(repositories.foods)
        logger.info("seed_complete", created=created, total=len(SEED_FOODS))
        return 0
    except Exception as e:
        logger.error("seed_failed", error=str(e))
        return 1
    finally:
        repositories.close()


def main() -> None:
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
