"""OpenAI client - implements IMenuTextExtractor and IDishDetailGenerator ports.

Key Features:
- Structured outputs (native Pydantic support, strict decode boundary)
- Circuit breaker (5 failures → 60s timeout)
- Retry logic (exponential backoff) on transient API errors only
- Token cost accounting through the domain CostModel
"""

# mypy: warn-unused-ignores=False

import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from circuitbreaker import circuit
from openai import (
    APIError,
    AsyncOpenAI,
    ContentFilterFinishReasonError,
    LengthFinishReasonError,
)
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.menu.core.entities.korean_food import KoreanFoodDraft
from domain.menu.core.exceptions.domain_errors import MalformedResponseError
from domain.menu.core.value_objects.token_usage import CostModel, TokenUsage
from domain.menu.ocr.entities.menu_extraction import MenuExtraction
from infrastructure.ai.openai.models import DishDetailsResponse, MenuExtractionResponse
from infrastructure.ai.prompts.menu_analysis import (
    DISH_DETAILS_SYSTEM_PROMPT,
    MENU_OCR_SYSTEM_PROMPT,
    MENU_OCR_USER_PROMPT,
    dish_details_user_prompt,
)

logger = logging.getLogger(__name__)

TResponse = TypeVar("TResponse", bound=BaseModel)

MAX_EXTRACTED_NAMES = 3
MAX_INGREDIENTS = 6
OCR_MAX_TOKENS = 1000
DETAILS_MAX_TOKENS = 2000


class OpenAIMenuClient:
    """
    OpenAI GPT-4o client implementing the menu OCR and dish detail ports.

    Follows Dependency Inversion Principle:
    - Domain defines IMenuTextExtractor / IDishDetailGenerator (ports)
    - Infrastructure provides OpenAIMenuClient (adapter)

    Example:
        >>> client = OpenAIMenuClient(api_key="sk-...")
        >>> extraction = await client.extract_names(image_base64)
        >>> extraction.extracted_names
        ['비빔밥', '김치찌개']
        >>> draft = await client.synthesize("호떡")
        >>> draft.name_english
        'Hotteok'
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        timeout_s: float = 30.0,
        temperature: float = 0.1,
        cost_model: Optional[CostModel] = None,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Vision-capable model name
            timeout_s: Timeout of each API call
            temperature: Sampling temperature (low for consistency)
            cost_model: Token pricing (defaults to the standard rates)
        """
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout_s)
        self._model = model
        self._temperature = temperature
        self._cost_model = cost_model or CostModel()
        self._usage_totals = {"calls": 0, "prompt_tokens": 0, "completion_tokens": 0}

    async def __aenter__(self) -> "OpenAIMenuClient":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    @circuit(failure_threshold=5, recovery_timeout=60, name="openai_menu_ocr")  # type: ignore[misc]
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((TimeoutError, ConnectionError, APIError)),
    )
    async def extract_names(self, image_base64: str) -> MenuExtraction:
        """
        Extract Korean dish names from a menu photo.

        Implements IMenuTextExtractor.extract_names() port.

        Args:
            image_base64: Base64-encoded photo bytes (no data URL prefix)

        Returns:
            MenuExtraction with at most 3 names and the priced token usage

        Raises:
            MalformedResponseError: If the model output is empty or invalid
            APIError: On OpenAI API failures (after retries)
        """
        start_time = time.time()

        logger.info(
            "Extracting menu names",
            extra={"image_size_b64": len(image_base64), "model": self._model},
        )

        user_message: Dict[str, Any] = {
            "role": "user",
            "content": [
                {"type": "text", "text": MENU_OCR_USER_PROMPT},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"},
                },
            ],
        }

        response, usage = await self._structured_completion(
            messages=[user_message],
            response_model=MenuExtractionResponse,
            system_prompt=MENU_OCR_SYSTEM_PROMPT,
            max_tokens=OCR_MAX_TOKENS,
        )

        extraction = self._to_extraction(response, usage)

        logger.info(
            "Menu extraction complete",
            extra={
                "is_korean_menu": extraction.is_korean_menu,
                "names": extraction.extracted_names,
                "total_detected": extraction.total_detected,
                "cost_usd": usage.cost_usd,
                "processing_time_ms": int((time.time() - start_time) * 1000),
            },
        )
        return extraction

    @circuit(failure_threshold=5, recovery_timeout=60, name="openai_dish_details")  # type: ignore[misc]
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((TimeoutError, ConnectionError, APIError)),
    )
    async def synthesize(self, korean_name: str) -> KoreanFoodDraft:
        """
        Generate the record of a dish missing from the food store.

        Implements IDishDetailGenerator.synthesize() port.

        Args:
            korean_name: Dish name as read off the menu

        Returns:
            KoreanFoodDraft (name_korean is always the requested name)

        Raises:
            MalformedResponseError: If the model output is empty or invalid
            APIError: On OpenAI API failures (after retries)
        """
        logger.info(
            "Generating dish details",
            extra={"korean_name": korean_name, "model": self._model},
        )

        response, _ = await self._structured_completion(
            messages=[{"role": "user", "content": dish_details_user_prompt(korean_name)}],
            response_model=DishDetailsResponse,
            system_prompt=DISH_DETAILS_SYSTEM_PROMPT,
            max_tokens=DETAILS_MAX_TOKENS,
        )

        return self._to_draft(korean_name, response)

    async def _structured_completion(
        self,
        messages: List[Dict[str, Any]],
        response_model: Type[TResponse],
        system_prompt: str,
        max_tokens: int,
    ) -> Tuple[TResponse, TokenUsage]:
        """
        Execute OpenAI completion with structured output.

        Uses beta.chat.completions.parse() for native Pydantic support.

        Returns:
            (parsed model, priced token usage)

        Raises:
            MalformedResponseError: On empty, refused, truncated or
                schema-mismatched output
            APIError: On API failures
        """
        full_messages = [
            {"role": "system", "content": system_prompt},
            *messages,
        ]

        try:
            response = await self._client.beta.chat.completions.parse(
                model=self._model,
                messages=full_messages,  # type: ignore[arg-type]
                response_format=response_model,
                temperature=self._temperature,
                max_tokens=max_tokens,
            )
        except (ValidationError, LengthFinishReasonError, ContentFilterFinishReasonError) as e:
            logger.warning(
                "OpenAI output rejected",
                extra={"response_model": response_model.__name__, "error": str(e)},
            )
            raise MalformedResponseError(
                f"Invalid {response_model.__name__} output: {e}"
            ) from e

        usage = response.usage
        if not usage:
            raise MalformedResponseError("OpenAI response missing usage information")

        priced = self._cost_model.price(
            usage.prompt_tokens, usage.completion_tokens, usage.total_tokens
        )
        self._usage_totals["calls"] += 1
        self._usage_totals["prompt_tokens"] += usage.prompt_tokens
        self._usage_totals["completion_tokens"] += usage.completion_tokens

        logger.info(
            "OpenAI response received",
            extra={
                "model": self._model,
                "response_model": response_model.__name__,
                "total_tokens": usage.total_tokens,
                "prompt_tokens": usage.prompt_tokens,
                "completion_tokens": usage.completion_tokens,
            },
        )

        if not response.choices:
            raise MalformedResponseError("OpenAI returned no choices")

        message = response.choices[0].message
        if getattr(message, "refusal", None):
            raise MalformedResponseError(f"OpenAI refused the request: {message.refusal}")

        parsed = message.parsed
        if not parsed:
            raise MalformedResponseError("OpenAI returned empty parsed response")

        return parsed, priced

    @staticmethod
    def _to_extraction(response: MenuExtractionResponse, usage: TokenUsage) -> MenuExtraction:
        names = [n.strip() for n in response.extracted_names if n and n.strip()]
        total = response.total_detected
        if len(names) > MAX_EXTRACTED_NAMES:
            # Keep the count honest when the model ignores the 3-name cap
            total = max(total or 0, len(names))
            names = names[:MAX_EXTRACTED_NAMES]

        return MenuExtraction(
            is_korean_menu=response.is_korean_menu,
            extracted_names=names if response.is_korean_menu else [],
            total_detected=total,
            token_usage=usage,
        )

    @staticmethod
    def _to_draft(korean_name: str, response: DishDetailsResponse) -> KoreanFoodDraft:
        name_english = response.name_english.strip()
        return KoreanFoodDraft(
            name_korean=korean_name,
            name_english=name_english,
            description=response.description,
            description_english=response.description_english or f"Traditional Korean {name_english}",
            ingredients=response.ingredients[:MAX_INGREDIENTS],
            calories=response.calories,
            category=response.category,
            spiciness=response.spiciness,
            allergens=list(response.allergens),
            is_vegetarian=response.is_vegetarian,
            is_vegan=response.is_vegan,
            serving_size=response.serving_size,
            cooking_method=response.cooking_method,
            region=response.region,
        )

    def get_usage_stats(self) -> Dict[str, int]:
        """
        Cumulative token counts since startup.

        Example:
            >>> client.get_usage_stats()["calls"]
            4
        """
        return dict(self._usage_totals)
