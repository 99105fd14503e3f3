"""Menu domain event handlers."""

from .menu_analyzed_handler import MenuAnalyzedHandler

__all__ = ["MenuAnalyzedHandler"]
