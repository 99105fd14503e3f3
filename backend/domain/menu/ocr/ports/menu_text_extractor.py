"""Port (interface) for menu OCR providers."""

from typing import Protocol

from domain.menu.ocr.entities.menu_extraction import MenuExtraction


class IMenuTextExtractor(Protocol):
    """
    Interface for vision models that read dish names off a menu photo.

    Implementations:
    - OpenAI vision model (production)
    - Stub extractor (tests and local development)
    """

    async def extract_names(self, image_base64: str) -> MenuExtraction:
        """
        Extract Korean dish names from a menu photo.

        Performs OCR only: names are returned as written, without
        translation or description.

        Args:
            image_base64: Base64-encoded JPEG/PNG bytes (no data URL prefix)

        Returns:
            MenuExtraction with at most 3 names and the true total count

        Raises:
            MalformedResponseError: If the model output is empty or does
                not match the expected shape
        """
        ...
