"""Unit tests for DishResolver (cache-first, generate-on-miss)."""

import pytest
from unittest.mock import AsyncMock

from domain.menu.core.entities.detected_dish import DishSource
from domain.menu.core.entities.korean_food import KoreanFood, KoreanFoodDraft
from domain.menu.core.exceptions import DishResolutionError
from domain.menu.images.entities.image_result import ImageAccuracy, ImageResult
from domain.menu.resolution.services.dish_resolver import DishResolver
from infrastructure.persistence.in_memory.korean_food_repository import (
    InMemoryKoreanFoodRepository,
)

HOTTEOK_IMAGE = ImageResult(
    url="https://images.pexels.com/hotteok.jpg",
    provider="pexels",
    relevance_score=6,
    accuracy=ImageAccuracy.HIGH,
)


@pytest.fixture
def food_repository():
    return InMemoryKoreanFoodRepository()


@pytest.fixture
def mock_generator():
    generator = AsyncMock()
    generator.synthesize.return_value = KoreanFoodDraft(
        name_korean="호떡",
        name_english="Hotteok",
        description="Sweet filled pancake",
        description_english="Korean sweet pancake",
        calories=230,
        category="Dessert",
    )
    return generator


@pytest.fixture
def mock_waterfall():
    waterfall = AsyncMock()
    waterfall.resolve_with_fallback.return_value = HOTTEOK_IMAGE
    return waterfall


@pytest.fixture
def resolver(food_repository, mock_generator, mock_waterfall):
    return DishResolver(
        food_repository=food_repository,
        detail_generator=mock_generator,
        image_waterfall=mock_waterfall,
    )


class TestDishResolver:
    """Test store hits and generative misses."""

    @pytest.mark.asyncio
    async def test_store_hit(self, resolver, food_repository, mock_generator, mock_waterfall):
        await food_repository.create(
            KoreanFood(name_korean="비빔밥", name_english="Bibimbap", calories=420, spiciness=2)
        )

        resolution = await resolver.resolve("비빔밥")

        assert resolution.generated is False
        assert resolution.dish.source is DishSource.DATABASE
        assert resolution.dish.confidence == 1.0
        assert resolution.dish.calories == 420
        mock_generator.synthesize.assert_not_called()
        mock_waterfall.resolve_with_fallback.assert_awaited_once_with("비빔밥", "Bibimbap")

    @pytest.mark.asyncio
    async def test_store_hit_does_not_write(self, resolver, food_repository):
        stored = await food_repository.create(
            KoreanFood(name_korean="비빔밥", name_english="Bibimbap")
        )

        await resolver.resolve("비빔밥")

        again = await food_repository.find_by_korean_name("비빔밥")
        assert again is not None
        assert again.updated_at == stored.updated_at
        assert again.image_url is None

    @pytest.mark.asyncio
    async def test_miss_generates_and_persists(
        self, resolver, food_repository, mock_generator, mock_waterfall
    ):
        resolution = await resolver.resolve("호떡")

        assert resolution.generated is True
        assert resolution.dish.source is DishSource.AI
        assert resolution.dish.confidence == 0.8
        assert resolution.dish.image_url == HOTTEOK_IMAGE.url
        mock_generator.synthesize.assert_awaited_once_with("호떡")
        # Image lookup uses the generated English name
        mock_waterfall.resolve_with_fallback.assert_awaited_once_with("호떡", "Hotteok")

        stored = await food_repository.find_by_korean_name("호떡")
        assert stored is not None
        assert stored.image_url == HOTTEOK_IMAGE.url

    @pytest.mark.asyncio
    async def test_second_resolution_is_store_hit(self, resolver, mock_generator):
        await resolver.resolve("호떡")
        resolution = await resolver.resolve("호떡")

        assert resolution.dish.source is DishSource.DATABASE
        assert mock_generator.synthesize.await_count == 1

    @pytest.mark.asyncio
    async def test_miss_without_image(self, resolver, food_repository, mock_waterfall):
        mock_waterfall.resolve_with_fallback.return_value = None

        resolution = await resolver.resolve("호떡")

        assert resolution.dish.image_url is None
        assert resolution.dish.image_accuracy is None
        stored = await food_repository.find_by_korean_name("호떡")
        assert stored is not None
        assert stored.image_url is None

    @pytest.mark.asyncio
    async def test_generator_failure_wrapped(self, resolver, mock_generator):
        mock_generator.synthesize.side_effect = RuntimeError("model down")

        with pytest.raises(DishResolutionError) as exc_info:
            await resolver.resolve("호떡")

        assert exc_info.value.korean_name == "호떡"

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, resolver):
        with pytest.raises(DishResolutionError):
            await resolver.resolve("   ")

    @pytest.mark.asyncio
    async def test_name_is_trimmed(self, resolver, food_repository):
        await food_repository.create(KoreanFood(name_korean="비빔밥", name_english="Bibimbap"))

        resolution = await resolver.resolve(" 비빔밥 ")

        assert resolution.dish.name_korean == "비빔밥"

    @pytest.mark.asyncio
    async def test_concurrent_creation_serves_stored_record(
        self, resolver, food_repository, mock_waterfall, monkeypatch
    ):
        winner = await food_repository.create(
            KoreanFood(
                name_korean="호떡",
                name_english="Hotteok",
                description="Stored first",
                calories=250,
                image_url=HOTTEOK_IMAGE.url,
            )
        )
        # The lookup ran before the other request stored its record
        monkeypatch.setattr(food_repository, "find_by_korean_name", AsyncMock(return_value=None))

        resolution = await resolver.resolve("호떡")

        assert resolution.generated is True
        assert resolution.dish.source is DishSource.DATABASE
        assert resolution.dish.description == "Stored first"
        assert resolution.dish.calories == winner.calories
        assert resolution.dish.image_url == HOTTEOK_IMAGE.url
        mock_waterfall.resolve_with_fallback.assert_awaited_once_with("호떡", "Hotteok")
        assert len(await food_repository.list_all()) == 1

    @pytest.mark.asyncio
    async def test_concurrent_creation_reresolves_image_for_stored_name(
        self, resolver, food_repository, mock_waterfall, monkeypatch
    ):
        await food_repository.create(KoreanFood(name_korean="호떡", name_english="Sweet Pancake"))
        monkeypatch.setattr(food_repository, "find_by_korean_name", AsyncMock(return_value=None))

        resolution = await resolver.resolve("호떡")

        assert resolution.dish.name_english == "Sweet Pancake"
        assert mock_waterfall.resolve_with_fallback.await_args_list[-1].args == (
            "호떡",
            "Sweet Pancake",
        )
