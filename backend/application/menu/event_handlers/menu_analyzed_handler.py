"""Handler for MenuAnalyzed domain event.

Side effects only: structured logging and pipeline metrics.
"""

import logging

from domain.menu.core.events.menu_analyzed import MenuAnalyzed
from metrics.menu_analysis import record_cost_usd, record_request

logger = logging.getLogger(__name__)


class MenuAnalyzedHandler:
    """Handler for MenuAnalyzed domain events.

    Does NOT modify system state.
    """

    async def handle(self, event: MenuAnalyzed) -> None:
        """Handle MenuAnalyzed event.

        Args:
            event: MenuAnalyzed domain event
        """
        if event.cached:
            status = "cached"
        elif not event.is_korean_menu:
            status = "not_korean"
        else:
            status = "completed"

        record_request(status)
        if not event.cached:
            record_cost_usd(event.cost_usd)

        logger.info(
            "menu_analyzed",
            extra={
                "event_type": "MenuAnalyzed",
                "event_id": str(event.event_id),
                "occurred_at": event.occurred_at.isoformat(),
                "analysis_id": event.analysis_id,
                "user_id": event.user_id,
                "dish_count": event.dish_count,
                "generated_count": event.generated_count,
                "cost_usd": event.cost_usd,
                "cached": event.cached,
            },
        )
