"""Unit tests for food catalogue queries and the update command."""

import pytest
import pytest_asyncio

from application.menu.commands.update_korean_food import (
    UpdateKoreanFoodCommand,
    UpdateKoreanFoodCommandHandler,
)
from application.menu.queries.get_recent_analyses import (
    GetRecentAnalysesQuery,
    GetRecentAnalysesQueryHandler,
)
from application.menu.queries.search_korean_foods import (
    GetKoreanFoodQuery,
    GetKoreanFoodQueryHandler,
    SearchKoreanFoodsQuery,
    SearchKoreanFoodsQueryHandler,
)
from domain.menu.core.entities.korean_food import KoreanFood
from domain.menu.core.entities.menu_analysis import MenuAnalysis
from domain.menu.core.exceptions import FoodNotFoundError, InvalidFoodError
from infrastructure.persistence.in_memory.korean_food_repository import (
    InMemoryKoreanFoodRepository,
)
from infrastructure.persistence.in_memory.menu_analysis_repository import (
    InMemoryMenuAnalysisRepository,
)


@pytest_asyncio.fixture
async def food_repository():
    repository = InMemoryKoreanFoodRepository()
    await repository.create(KoreanFood(name_korean="비빔밥", name_english="Bibimbap"))
    await repository.create(KoreanFood(name_korean="김치찌개", name_english="Kimchi Jjigae"))
    await repository.create(KoreanFood(name_korean="김밥", name_english="Gimbap"))
    return repository


class TestSearchKoreanFoods:
    @pytest.mark.asyncio
    async def test_empty_query_lists_all_sorted(self, food_repository):
        handler = SearchKoreanFoodsQueryHandler(food_repository)

        foods = await handler.handle(SearchKoreanFoodsQuery(query="  "))

        assert [f.name_korean for f in foods] == sorted(["비빔밥", "김치찌개", "김밥"])

    @pytest.mark.asyncio
    async def test_matches_korean_or_english(self, food_repository):
        handler = SearchKoreanFoodsQueryHandler(food_repository)

        korean = await handler.handle(SearchKoreanFoodsQuery(query="김"))
        english = await handler.handle(SearchKoreanFoodsQuery(query="BIBIM"))

        assert {f.name_korean for f in korean} == {"김치찌개", "김밥"}
        assert [f.name_korean for f in english] == ["비빔밥"]

    @pytest.mark.asyncio
    async def test_get_by_korean_name(self, food_repository):
        handler = GetKoreanFoodQueryHandler(food_repository)

        found = await handler.handle(GetKoreanFoodQuery(name_korean="비빔밥"))
        missing = await handler.handle(GetKoreanFoodQuery(name_korean="호떡"))

        assert found is not None
        assert found.name_english == "Bibimbap"
        assert missing is None


class TestUpdateKoreanFood:
    @pytest.mark.asyncio
    async def test_update_fields(self, food_repository):
        food = await food_repository.find_by_korean_name("비빔밥")
        handler = UpdateKoreanFoodCommandHandler(food_repository)

        updated = await handler.handle(
            UpdateKoreanFoodCommand(food_id=food.id, changes={"calories": 450, "spiciness": 1})
        )

        assert updated.calories == 450
        stored = await food_repository.find_by_korean_name("비빔밥")
        assert stored.spiciness == 1

    @pytest.mark.asyncio
    async def test_unknown_food(self, food_repository):
        handler = UpdateKoreanFoodCommandHandler(food_repository)

        with pytest.raises(FoodNotFoundError):
            await handler.handle(UpdateKoreanFoodCommand(food_id="missing", changes={"calories": 1}))

    @pytest.mark.asyncio
    async def test_empty_changes(self, food_repository):
        handler = UpdateKoreanFoodCommandHandler(food_repository)

        with pytest.raises(InvalidFoodError):
            await handler.handle(UpdateKoreanFoodCommand(food_id="any"))

    @pytest.mark.asyncio
    async def test_invalid_changes(self, food_repository):
        food = await food_repository.find_by_korean_name("비빔밥")
        handler = UpdateKoreanFoodCommandHandler(food_repository)

        with pytest.raises(InvalidFoodError):
            await handler.handle(UpdateKoreanFoodCommand(food_id=food.id, changes={"spiciness": 8}))


class TestRecentAnalyses:
    @pytest.mark.asyncio
    async def test_newest_first_with_limit(self):
        repository = InMemoryMenuAnalysisRepository()
        for i in range(3):
            await repository.create(
                MenuAnalysis(
                    image_hash=f"{i}" * 64,
                    extracted_food_names=[],
                    detected_dishes=[],
                    is_korean_menu=False,
                )
            )
        handler = GetRecentAnalysesQueryHandler(repository)

        recent = await handler.handle(GetRecentAnalysesQuery(limit=2))

        assert len(recent) == 2
        assert recent[0].created_at >= recent[1].created_at
