"""Provider Factory for the menu AI services.

Environment-based provider selection with graceful fallback to stubs.
Strategy:
- .env (runtime): VISION_PROVIDER=openai
- .env.test (pytest): VISION_PROVIDER=stub
- Default: stub (safe fallback if env vars not set)

One OpenAI client serves both ports, so OCR and dish generation share a
connection pool and a usage tally.

Usage:
    from infrastructure.menu.providers.factory import (
        get_text_extractor,
        get_detail_generator,
    )

    extractor = get_text_extractor()  # Returns stub or real based on env
    generator = get_detail_generator()
"""

from typing import Optional

from domain.menu.ocr.ports.menu_text_extractor import IMenuTextExtractor
from domain.menu.resolution.ports.dish_detail_generator import IDishDetailGenerator
from infrastructure.ai.openai.client import OpenAIMenuClient
from infrastructure.config import AppConfig
from infrastructure.menu.providers.stub_menu_provider import (
    StubDishDetailGenerator,
    StubMenuTextExtractor,
)


class _StubPair:
    def __init__(self) -> None:
        self.extractor = StubMenuTextExtractor()
        self.generator = StubDishDetailGenerator()


def create_openai_client(config: Optional[AppConfig] = None) -> Optional[OpenAIMenuClient]:
    """Create the OpenAI client when VISION_PROVIDER=openai.

    Environment variable: VISION_PROVIDER
    Values:
        - "openai": OpenAI GPT-4o (requires OPENAI_API_KEY)
        - "stub": Stub providers (default)

    Returns:
        OpenAIMenuClient, or None in stub mode

    Raises:
        ValueError: If VISION_PROVIDER=openai without OPENAI_API_KEY
    """
    config = config or AppConfig.from_env()

    if config.vision_provider != "openai":
        return None

    if not config.openai_api_key:
        raise ValueError(
            "VISION_PROVIDER=openai but OPENAI_API_KEY not set. "
            "Set OPENAI_API_KEY in .env or use VISION_PROVIDER=stub"
        )
    return OpenAIMenuClient(
        api_key=config.openai_api_key,
        model=config.openai_model,
        timeout_s=config.openai_timeout_s,
        cost_model=config.cost_model,
    )


# Singleton instances (lazy initialization)
_openai_client: Optional[OpenAIMenuClient] = None
_stub_pair: Optional[_StubPair] = None
_initialized = False


def _ensure_providers() -> None:
    global _openai_client, _stub_pair, _initialized
    if _initialized:
        return
    _openai_client = create_openai_client()
    if _openai_client is None:
        _stub_pair = _StubPair()
    _initialized = True


def get_text_extractor() -> IMenuTextExtractor:
    """Get singleton menu OCR provider."""
    _ensure_providers()
    if _openai_client is not None:
        return _openai_client
    assert _stub_pair is not None
    return _stub_pair.extractor


def get_detail_generator() -> IDishDetailGenerator:
    """Get singleton dish detail provider."""
    _ensure_providers()
    if _openai_client is not None:
        return _openai_client
    assert _stub_pair is not None
    return _stub_pair.generator


def reset_providers() -> None:
    """Reset all singleton provider instances.

    Useful for testing to force re-creation with different env vars.
    """
    global _openai_client, _stub_pair, _initialized
    _openai_client = None
    _stub_pair = None
    _initialized = False
