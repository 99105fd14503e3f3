"""Unit tests for menu entities and value objects."""

import base64
from datetime import datetime

import pytest

from domain.menu.core.entities.detected_dish import DetectedDish, DishSource
from domain.menu.core.entities.korean_food import KoreanFood, KoreanFoodDraft
from domain.menu.core.entities.menu_analysis import MenuAnalysis
from domain.menu.core.events.menu_analyzed import MenuAnalyzed
from domain.menu.core.exceptions import (
    InvalidFoodError,
    InvalidImageError,
    TooManyItemsError,
    UsageLimitExceededError,
)
from domain.menu.core.value_objects.image_hash import ImageHash
from domain.menu.core.value_objects.token_usage import CostModel, TokenUsage
from domain.menu.images.entities.image_result import ImageAccuracy, ImageResult
from domain.menu.ocr.entities.menu_extraction import MenuExtraction


def _bibimbap(**overrides) -> KoreanFood:
    values = dict(
        name_korean="비빔밥",
        name_english="Bibimbap",
        description="Mixed rice with vegetables",
        description_english="Rice bowl",
        ingredients=["rice", "egg"],
        calories=420,
        category="Main Dish",
        spiciness=2,
    )
    values.update(overrides)
    return KoreanFood(**values)


class TestKoreanFood:
    """Test KoreanFood invariants and edits."""

    def test_valid_food(self):
        food = _bibimbap()

        assert food.id
        assert food.created_at.tzinfo is not None

    def test_empty_korean_name_rejected(self):
        with pytest.raises(InvalidFoodError):
            _bibimbap(name_korean="  ")

    @pytest.mark.parametrize("spiciness", [-1, 6])
    def test_spiciness_out_of_range(self, spiciness):
        with pytest.raises(InvalidFoodError, match="Spiciness"):
            _bibimbap(spiciness=spiciness)

    def test_negative_calories_rejected(self):
        with pytest.raises(InvalidFoodError):
            _bibimbap(calories=-1)

    def test_vegan_implies_vegetarian(self):
        food = _bibimbap(is_vegan=True, is_vegetarian=False)

        assert food.is_vegetarian is True

    def test_naive_timestamps_rejected(self):
        with pytest.raises(InvalidFoodError):
            _bibimbap(created_at=datetime(2024, 1, 1))

    def test_from_draft_copies_attributes(self):
        draft = KoreanFoodDraft(name_korean="호떡", name_english="Hotteok", calories=230)

        food = KoreanFood.from_draft(draft, image_url="https://img/hotteok.jpg")

        assert food.name_korean == "호떡"
        assert food.calories == 230
        assert food.image_url == "https://img/hotteok.jpg"

    def test_with_changes_refreshes_updated_at(self):
        food = _bibimbap()

        updated = food.with_changes({"calories": 500, "spiciness": 1})

        assert updated.calories == 500
        assert updated.spiciness == 1
        assert updated.id == food.id
        assert updated.updated_at >= food.updated_at
        assert food.calories == 420

    def test_with_changes_rejects_immutable_fields(self):
        with pytest.raises(InvalidFoodError):
            _bibimbap().with_changes({"name_korean": "김밥"})

    def test_with_changes_rejects_unknown_fields(self):
        with pytest.raises(InvalidFoodError):
            _bibimbap().with_changes({"price": 12})

    def test_with_changes_validates_result(self):
        with pytest.raises(InvalidFoodError):
            _bibimbap().with_changes({"spiciness": 9})

    @pytest.mark.parametrize("name_english", [None, "", "   ", 42])
    def test_with_changes_rejects_invalid_english_name(self, name_english):
        with pytest.raises(InvalidFoodError, match="name_english"):
            _bibimbap().with_changes({"name_english": name_english})

    @pytest.mark.parametrize(
        "changes",
        [{"spiciness": None}, {"calories": None}, {"calories": "420"}, {"spiciness": True}],
    )
    def test_with_changes_rejects_non_integer_numbers(self, changes):
        with pytest.raises(InvalidFoodError, match="must be an integer"):
            _bibimbap().with_changes(changes)


class TestDetectedDish:
    """Test DetectedDish construction from records."""

    def test_from_store_has_full_confidence(self):
        image = ImageResult(
            url="https://blogfiles.naver.net/a.jpg",
            provider="naver",
            relevance_score=13,
            accuracy=ImageAccuracy.HIGH,
        )

        dish = DetectedDish.from_store(_bibimbap(), image)

        assert dish.source is DishSource.DATABASE
        assert dish.confidence == 1.0
        assert dish.image_url == image.url
        assert dish.image_accuracy is ImageAccuracy.HIGH
        assert dish.description_english == "Traditional Korean Bibimbap"

    def test_from_generated_keeps_generated_english_description(self):
        dish = DetectedDish.from_generated(_bibimbap(), None)

        assert dish.source is DishSource.AI
        assert dish.confidence == 0.8
        assert dish.description_english == "Rice bowl"
        assert dish.image_url is None
        assert dish.image_accuracy is None

    def test_confidence_must_match_source(self):
        with pytest.raises(ValueError):
            DetectedDish(
                name_korean="비빔밥",
                name_english="Bibimbap",
                description="",
                confidence=0.8,
                source=DishSource.DATABASE,
            )

    def test_accuracy_without_url_rejected(self):
        with pytest.raises(ValueError):
            DetectedDish(
                name_korean="비빔밥",
                name_english="Bibimbap",
                description="",
                confidence=1.0,
                source=DishSource.DATABASE,
                image_accuracy=ImageAccuracy.LOW,
            )

    def test_dict_round_trip(self):
        dish = DetectedDish.from_generated(_bibimbap(), None)

        assert DetectedDish.from_dict(dish.to_dict()) == dish


class TestTokenUsage:
    """Test TokenUsage and CostModel."""

    def test_addition(self):
        total = TokenUsage(100, 50, 150, 0.1, 0.15) + TokenUsage(10, 5, 15, 0.01, 0.015)

        assert total.prompt_tokens == 110
        assert total.total_tokens == 165
        assert total.cost_usd == pytest.approx(0.11)

    def test_negative_values_rejected(self):
        with pytest.raises(ValueError):
            TokenUsage(prompt_tokens=-1)

    def test_price(self):
        usage = CostModel().price(1000, 1000)

        assert usage.total_tokens == 2000
        assert usage.cost_usd == pytest.approx(0.0125)
        assert usage.cost_aud == pytest.approx(0.01875)

    def test_price_keeps_reported_total(self):
        assert CostModel().price(10, 20, total_tokens=35).total_tokens == 35

    def test_generation_estimate(self):
        estimate = CostModel().generation_estimate()

        assert estimate.total_tokens == 600
        assert estimate.cost_usd == pytest.approx(0.004)
        assert estimate.cost_aud == pytest.approx(0.006)

    def test_invalid_multiplier(self):
        with pytest.raises(ValueError):
            CostModel(aud_multiplier=0)


class TestImageHash:
    """Test content hashing of photos."""

    def test_same_bytes_same_hash(self):
        payload = base64.b64encode(b"menu photo").decode()

        assert ImageHash.from_base64(payload) == ImageHash.from_bytes(b"menu photo")

    def test_data_url_prefix_ignored(self):
        payload = base64.b64encode(b"menu photo").decode()

        assert ImageHash.from_base64(f"data:image/jpeg;base64,{payload}") == ImageHash.from_base64(
            payload
        )

    def test_invalid_base64(self):
        with pytest.raises(InvalidImageError):
            ImageHash.from_base64("not base64!!")

    def test_invalid_digest(self):
        with pytest.raises(ValueError):
            ImageHash("abc")


class TestMenuAnalysisAggregate:
    """Test MenuAnalysis invariants."""

    def test_non_korean_menu_cannot_have_dishes(self):
        dish = DetectedDish.from_store(_bibimbap(), None)

        with pytest.raises(ValueError):
            MenuAnalysis(
                image_hash="0" * 64,
                extracted_food_names=[],
                detected_dishes=[dish],
                is_korean_menu=False,
            )

    def test_dish_count(self):
        dish = DetectedDish.from_store(_bibimbap(), None)
        analysis = MenuAnalysis(
            image_hash="0" * 64,
            extracted_food_names=["비빔밥"],
            detected_dishes=[dish],
            is_korean_menu=True,
        )

        assert analysis.dish_count() == 1


class TestMenuExtraction:
    def test_detected_count_prefers_reported_total(self):
        extraction = MenuExtraction(True, ["비빔밥"], total_detected=5)

        assert extraction.detected_count() == 5

    def test_detected_count_falls_back_to_names(self):
        assert MenuExtraction(True, ["비빔밥", "김밥"]).detected_count() == 2


class TestErrorsAndEvents:
    def test_too_many_items_message(self):
        error = TooManyItemsError(5)

        assert error.detected_count == 5
        assert "5 items found" in str(error)
        assert "3 or fewer" in str(error)

    def test_usage_limit_flags(self):
        anonymous = UsageLimitExceededError(3, 3, requires_auth=True)
        signed_in = UsageLimitExceededError(3, 3, requires_payment=True)

        assert "sign in" in str(anonymous)
        assert "premium" in str(signed_in)

    def test_event_rejects_inconsistent_counts(self):
        with pytest.raises(ValueError):
            MenuAnalyzed.create(
                analysis_id="a-1",
                image_hash="0" * 64,
                is_korean_menu=True,
                dish_count=1,
                generated_count=2,
                cost_usd=0.0,
            )
