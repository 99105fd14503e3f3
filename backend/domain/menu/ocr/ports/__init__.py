"""OCR domain ports (interfaces)."""

from domain.menu.ocr.ports.menu_text_extractor import IMenuTextExtractor

__all__ = ["IMenuTextExtractor"]
