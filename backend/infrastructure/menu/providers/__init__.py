"""Menu OCR and dish detail providers (stub and OpenAI)."""

from .stub_menu_provider import StubDishDetailGenerator, StubMenuTextExtractor

__all__ = ["StubMenuTextExtractor", "StubDishDetailGenerator"]
