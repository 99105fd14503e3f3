"""In-memory event bus implementation.

Provides an in-memory implementation of IEventBus port. Handlers run
sequentially in subscription order, inside the publishing request.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar

from domain.menu.core.events.base import DomainEvent

logger = logging.getLogger(__name__)

TEvent = TypeVar("TEvent", bound=DomainEvent)
Handler = Callable[[Any], Awaitable[None]]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class InMemoryEventBus:
    """
    In-memory implementation of IEventBus port.

    Handlers subscribed to a base event class also receive its
    subclasses. A failing handler is logged and never stops the others,
    nor the request that published the event.

    Thread safety: NOT thread-safe (use locks if needed in production)
    Persistence: Handlers lost on process restart (in-memory only)

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe(MenuAnalyzed, MenuAnalyzedHandler().handle)
        >>> await bus.publish(MenuAnalyzed.create(...))
    """

    def __init__(self) -> None:
        """Initialize event bus with empty handler registry."""
        self._handlers: Dict[Type[DomainEvent], List[Handler]] = {}

    def subscribe(
        self,
        event_type: Type[TEvent],
        handler: Callable[[TEvent], Awaitable[None]],
    ) -> None:
        """
        Subscribe a handler to an event type.

        Note:
            Same handler can be subscribed multiple times (will be called
            multiple times)
        """
        self._handlers.setdefault(event_type, []).append(handler)

        logger.debug(
            "Handler subscribed",
            extra={"event_type": event_type.__name__, "handler": _handler_name(handler)},
        )

    def _handlers_for(self, event_type: Type[DomainEvent]) -> List[Handler]:
        handlers: List[Handler] = []
        for cls in event_type.__mro__:
            handlers.extend(self._handlers.get(cls, []))
        return handlers

    async def publish(self, event: TEvent) -> None:
        """
        Publish an event to all subscribed handlers.

        Handlers of the exact type run first, then handlers of its bases.
        """
        event_type = type(event)
        handlers = self._handlers_for(event_type)

        if not handlers:
            logger.debug("No handlers for event", extra={"event_type": event_type.__name__})
            return

        logger.info(
            "Publishing event",
            extra={
                "event_type": event_type.__name__,
                "event_id": str(event.event_id),
                "handler_count": len(handlers),
            },
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    extra={
                        "event_type": event_type.__name__,
                        "event_id": str(event.event_id),
                        "handler": _handler_name(handler),
                        "error": str(e),
                    },
                    exc_info=True,
                )

    def unsubscribe(
        self,
        event_type: Type[TEvent],
        handler: Callable[[TEvent], Awaitable[None]],
    ) -> bool:
        """
        Unsubscribe a handler from an event type.

        Returns:
            True if handler was found and removed (first occurrence only)
        """
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False

        handlers.remove(handler)
        return True

    def clear(self) -> None:
        """Clear all event subscriptions (testing)."""
        self._handlers.clear()

    def get_handler_count(self, event_type: Type[TEvent]) -> int:
        """Number of handlers that would receive an event of this type."""
        return len(self._handlers_for(event_type))
