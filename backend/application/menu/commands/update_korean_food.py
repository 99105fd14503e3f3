"""Update Korean food command - explicit edit of a stored record."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from domain.menu.core.entities.korean_food import KoreanFood
from domain.menu.core.exceptions.domain_errors import FoodNotFoundError, InvalidFoodError
from domain.shared.ports.korean_food_repository import IKoreanFoodRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateKoreanFoodCommand:
    """
    Command: Edit a stored food record.

    Attributes:
        food_id: Record ID
        changes: Partial record (snake_case field names)
    """

    food_id: str
    changes: Dict[str, Any] = field(default_factory=dict)


class UpdateKoreanFoodCommandHandler:
    """Handler for UpdateKoreanFoodCommand."""

    def __init__(self, repository: IKoreanFoodRepository):
        self._repository = repository

    async def handle(self, command: UpdateKoreanFoodCommand) -> KoreanFood:
        """
        Apply the edit.

        Returns:
            Updated KoreanFood

        Raises:
            InvalidFoodError: If no changes are given or they violate invariants
            FoodNotFoundError: If the record does not exist
        """
        if not command.changes:
            raise InvalidFoodError("No changes provided")

        updated = await self._repository.update(command.food_id, command.changes)
        if updated is None:
            raise FoodNotFoundError(f"Food {command.food_id} not found")

        logger.info(
            "Food record updated",
            extra={
                "food_id": command.food_id,
                "fields": sorted(command.changes),
            },
        )
        return updated
