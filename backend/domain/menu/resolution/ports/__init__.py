"""Resolution domain ports (interfaces)."""

from domain.menu.resolution.ports.dish_detail_generator import IDishDetailGenerator

__all__ = ["IDishDetailGenerator"]
