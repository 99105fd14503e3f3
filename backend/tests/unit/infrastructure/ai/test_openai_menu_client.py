"""Unit tests for OpenAIMenuClient.

Tests focus on:
- Mapping structured outputs to MenuExtraction / KoreanFoodDraft
- The 3-name cap and total_detected bookkeeping
- Token cost accounting
- Malformed output handling

Note: These are UNIT tests with mocked OpenAI API calls. Failing cases
are kept few per method so the circuit breakers stay closed.
"""

from typing import Any, Iterator, Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from domain.menu.core.exceptions import MalformedResponseError
from domain.menu.core.value_objects.token_usage import CostModel
from infrastructure.ai.openai.client import OpenAIMenuClient
from infrastructure.ai.openai.models import DishDetailsResponse, MenuExtractionResponse


@pytest.fixture
def mock_openai_client() -> Iterator[Any]:
    """Fixture providing mocked OpenAI AsyncClient."""
    with patch("infrastructure.ai.openai.client.AsyncOpenAI") as mock:
        yield mock


@pytest.fixture
def client(mock_openai_client: Any) -> OpenAIMenuClient:
    return OpenAIMenuClient(api_key="test-key")


def _response(parsed: Any, refusal: Optional[str] = None, usage: bool = True) -> Any:
    mock_response = MagicMock()
    mock_response.choices = [MagicMock(message=MagicMock(parsed=parsed, refusal=refusal))]
    mock_response.usage = (
        MagicMock(prompt_tokens=1000, completion_tokens=200, total_tokens=1200) if usage else None
    )
    return mock_response


def _bibimbap_details(**overrides: Any) -> DishDetailsResponse:
    values = dict(
        name_korean="비빔밥",
        name_english=" Bibimbap ",
        description="Rice topped with seasoned vegetables and gochujang.",
        ingredients=["rice", "spinach", "carrot", "egg", "beef", "gochujang", "sesame oil"],
        calories=560,
        category="Main Dish",
        spiciness=2,
        allergens=["egg", "sesame"],
        region="Jeonju",
    )
    values.update(overrides)
    return DishDetailsResponse(**values)


class TestInit:
    def test_defaults(self, mock_openai_client) -> None:
        client = OpenAIMenuClient(api_key="test-key")

        assert client._model == "gpt-4o"
        assert client._temperature == 0.1
        assert client.get_usage_stats() == {"calls": 0, "prompt_tokens": 0, "completion_tokens": 0}
        mock_openai_client.assert_called_once_with(api_key="test-key", timeout=30.0)

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, mock_openai_client) -> None:
        mock_openai_client.return_value.close = AsyncMock()

        async with OpenAIMenuClient(api_key="test-key") as client:
            assert isinstance(client, OpenAIMenuClient)

        mock_openai_client.return_value.close.assert_awaited_once()


class TestExtractNames:
    @pytest.mark.asyncio
    async def test_korean_menu(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(
                MenuExtractionResponse(
                    is_korean_menu=True,
                    extracted_names=["비빔밥", " 김치찌개 ", ""],
                    total_detected=2,
                )
            )
        )

        extraction = await client.extract_names("aGVsbG8=")

        assert extraction.is_korean_menu is True
        assert extraction.extracted_names == ["비빔밥", "김치찌개"]
        assert extraction.total_detected == 2
        assert extraction.token_usage.total_tokens == 1200
        assert extraction.token_usage.cost_usd == pytest.approx(0.0045)

        kwargs = client._client.beta.chat.completions.parse.call_args.kwargs
        assert kwargs["response_format"] is MenuExtractionResponse
        assert kwargs["messages"][0]["role"] == "system"
        image_part = kwargs["messages"][1]["content"][1]
        assert image_part["image_url"]["url"] == "data:image/jpeg;base64,aGVsbG8="

    @pytest.mark.asyncio
    async def test_names_over_cap_are_truncated(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(
                MenuExtractionResponse(
                    is_korean_menu=True,
                    extracted_names=["비빔밥", "김치찌개", "불고기", "냉면", "떡볶이"],
                )
            )
        )

        extraction = await client.extract_names("aGVsbG8=")

        assert extraction.extracted_names == ["비빔밥", "김치찌개", "불고기"]
        assert extraction.total_detected == 5

    @pytest.mark.asyncio
    async def test_not_korean_menu_drops_names(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(
                MenuExtractionResponse(is_korean_menu=False, extracted_names=["pizza"])
            )
        )

        extraction = await client.extract_names("aGVsbG8=")

        assert extraction.is_korean_menu is False
        assert extraction.extracted_names == []

    @pytest.mark.asyncio
    async def test_refusal_is_malformed(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(None, refusal="I can't help with that")
        )

        with pytest.raises(MalformedResponseError, match="refused"):
            await client.extract_names("aGVsbG8=")

    @pytest.mark.asyncio
    async def test_missing_usage_is_malformed(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(
                MenuExtractionResponse(is_korean_menu=True, extracted_names=["비빔밥"]),
                usage=False,
            )
        )

        with pytest.raises(MalformedResponseError, match="usage"):
            await client.extract_names("aGVsbG8=")


class TestSynthesize:
    @pytest.mark.asyncio
    async def test_maps_details_to_draft(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(_bibimbap_details())
        )

        draft = await client.synthesize("비빔밥")

        assert draft.name_korean == "비빔밥"
        assert draft.name_english == "Bibimbap"
        assert len(draft.ingredients) == 6
        assert draft.description_english == "Traditional Korean Bibimbap"
        assert draft.spiciness == 2
        assert draft.allergens == ["egg", "sesame"]
        assert draft.region == "Jeonju"

    @pytest.mark.asyncio
    async def test_requested_name_wins_over_model_name(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(
                _bibimbap_details(name_korean="돌솥비빔밥", description_english="Stone pot rice")
            )
        )

        draft = await client.synthesize("비빔밥")

        assert draft.name_korean == "비빔밥"
        assert draft.description_english == "Stone pot rice"

    @pytest.mark.asyncio
    async def test_empty_parse_is_malformed(self, client) -> None:
        client._client.beta.chat.completions.parse = AsyncMock(return_value=_response(None))

        with pytest.raises(MalformedResponseError):
            await client.synthesize("비빔밥")


class TestUsageStats:
    @pytest.mark.asyncio
    async def test_accumulates_across_calls(self, mock_openai_client) -> None:
        client = OpenAIMenuClient(
            api_key="test-key",
            cost_model=CostModel(),
        )
        client._client.beta.chat.completions.parse = AsyncMock(
            return_value=_response(
                MenuExtractionResponse(is_korean_menu=True, extracted_names=["비빔밥"])
            )
        )

        await client.extract_names("aGVsbG8=")
        await client.extract_names("aGVsbG8=")

        assert client.get_usage_stats() == {
            "calls": 2,
            "prompt_tokens": 2000,
            "completion_tokens": 400,
        }
