"""Domain events for menu analysis."""

from .base import DomainEvent
from .menu_analyzed import MenuAnalyzed

__all__ = ["DomainEvent", "MenuAnalyzed"]
