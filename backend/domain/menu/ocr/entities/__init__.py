"""OCR entities."""

from .menu_extraction import MenuExtraction

__all__ = ["MenuExtraction"]
