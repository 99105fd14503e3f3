"""OpenAI client implementation for menu OCR and dish detail generation."""

from infrastructure.ai.openai.client import OpenAIMenuClient
from infrastructure.ai.openai.models import (
    DishDetailsResponse,
    MenuExtractionResponse,
)

__all__ = [
    "OpenAIMenuClient",
    "MenuExtractionResponse",
    "DishDetailsResponse",
]
