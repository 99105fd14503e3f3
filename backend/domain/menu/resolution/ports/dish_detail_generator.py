"""Port (interface) for generative dish detail providers."""

from typing import Protocol

from domain.menu.core.entities.korean_food import KoreanFoodDraft


class IDishDetailGenerator(Protocol):
    """
    Interface for models that synthesize a full dish record from its name.

    Used on store misses only. The returned draft is persisted by the
    resolver, so later requests for the same name hit the store.
    """

    async def synthesize(self, korean_name: str) -> KoreanFoodDraft:
        """
        Generate the descriptive record of a Korean dish.

        Args:
            korean_name: Dish name exactly as read off the menu

        Returns:
            KoreanFoodDraft with every descriptive field populated

        Raises:
            MalformedResponseError: If the model output does not match the
                expected shape
        """
        ...
