"""Unit tests for the stub menu providers and the provider factory."""

import pytest
from unittest.mock import patch

from infrastructure.ai.openai.client import OpenAIMenuClient
from infrastructure.config import AppConfig
from infrastructure.menu.providers.factory import (
    create_openai_client,
    get_detail_generator,
    get_text_extractor,
    reset_providers,
)
from infrastructure.menu.providers.stub_menu_provider import (
    StubDishDetailGenerator,
    StubMenuTextExtractor,
)


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_providers()
    yield
    reset_providers()


class TestStubMenuTextExtractor:
    @pytest.mark.asyncio
    async def test_default_names(self):
        extraction = await StubMenuTextExtractor().extract_names("aGVsbG8=")

        assert extraction.is_korean_menu is True
        assert extraction.extracted_names == ["비빔밥", "김치찌개"]
        assert extraction.token_usage.cost_usd == 0.0

    @pytest.mark.asyncio
    async def test_not_korean_menu(self):
        extractor = StubMenuTextExtractor(names=["pizza"], is_korean_menu=False)

        extraction = await extractor.extract_names("aGVsbG8=")

        assert extraction.is_korean_menu is False
        assert extraction.extracted_names == []

    @pytest.mark.asyncio
    async def test_total_detected_passthrough(self):
        extractor = StubMenuTextExtractor(names=["비빔밥"], total_detected=7)

        assert (await extractor.extract_names("aGVsbG8=")).total_detected == 7


class TestStubDishDetailGenerator:
    @pytest.mark.asyncio
    async def test_known_dish(self):
        draft = await StubDishDetailGenerator().synthesize("김치찌개")

        assert draft.name_english == "Kimchi Jjigae"
        assert draft.spiciness == 3

    @pytest.mark.asyncio
    async def test_known_dish_is_a_copy(self):
        generator = StubDishDetailGenerator()

        first = await generator.synthesize("비빔밥")
        first.ingredients.append("mutated")
        second = await generator.synthesize("비빔밥")

        assert first is not second
        assert second.name_english == "Bibimbap"

    @pytest.mark.asyncio
    async def test_unknown_dish_placeholder(self):
        draft = await StubDishDetailGenerator().synthesize("호떡")

        assert draft.name_korean == "호떡"
        assert draft.name_english == "Korean Dish (호떡)"


class TestCreateOpenAIClient:
    def test_stub_mode(self):
        assert create_openai_client(AppConfig(vision_provider="stub")) is None

    def test_openai_without_key(self):
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            create_openai_client(AppConfig(vision_provider="openai"))

    def test_openai_with_key(self):
        with patch("infrastructure.ai.openai.client.AsyncOpenAI"):
            client = create_openai_client(
                AppConfig(vision_provider="openai", openai_api_key="sk-test", openai_model="gpt-4o-mini")
            )

        assert isinstance(client, OpenAIMenuClient)
        assert client._model == "gpt-4o-mini"


class TestSingletons:
    def test_defaults_to_stubs(self, monkeypatch):
        monkeypatch.delenv("VISION_PROVIDER", raising=False)

        assert isinstance(get_text_extractor(), StubMenuTextExtractor)
        assert isinstance(get_detail_generator(), StubDishDetailGenerator)
        assert get_text_extractor() is get_text_extractor()

    def test_openai_serves_both_ports(self, monkeypatch):
        monkeypatch.setenv("VISION_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch("infrastructure.ai.openai.client.AsyncOpenAI"):
            extractor = get_text_extractor()
            generator = get_detail_generator()

        assert isinstance(extractor, OpenAIMenuClient)
        assert extractor is generator

    def test_reset_rereads_environment(self, monkeypatch):
        monkeypatch.setenv("VISION_PROVIDER", "stub")
        stub = get_text_extractor()

        reset_providers()
        monkeypatch.setenv("VISION_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        with patch("infrastructure.ai.openai.client.AsyncOpenAI"):
            real = get_text_extractor()

        assert isinstance(stub, StubMenuTextExtractor)
        assert isinstance(real, OpenAIMenuClient)


class TestAppConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("VISION_PROVIDER", " OpenAI ")
        monkeypatch.setenv("PEXELS_API_KEY", "  ")
        monkeypatch.setenv("ADMIN_USER_IDS", "alice, bob,,")
        monkeypatch.setenv("FREE_USAGE_LIMIT", "5")
        monkeypatch.setenv("NAVER_IMAGE_SEARCH_ENABLED", "false")

        config = AppConfig.from_env()

        assert config.vision_provider == "openai"
        assert config.pexels_api_key is None
        assert config.admin_user_ids == frozenset({"alice", "bob"})
        assert config.free_usage_limit == 5
        assert config.naver_search_enabled is False

    def test_defaults(self, monkeypatch):
        for name in ("VISION_PROVIDER", "REPOSITORY_BACKEND", "MENU_MAX_ITEMS", "COST_AUD_MULTIPLIER"):
            monkeypatch.delenv(name, raising=False)

        config = AppConfig.from_env()

        assert config.vision_provider == "stub"
        assert config.repository_backend == "inmemory"
        assert config.max_menu_items == 3
        assert config.cost_model.aud_multiplier == 1.5
