"""In-memory event bus implementation.

Handlers are stored in memory and awaited in subscription order.
"""

from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar

import structlog

from domain.plan.core.events.base import DomainEvent

logger = structlog.get_logger(__name__)

TEvent = TypeVar("TEvent", bound=DomainEvent)


class InMemoryEventBus:
    """
    In-memory implementation of the IEventBus port.

    Persistence: handlers lost on process restart.
    Error handling: a failing handler is logged and the remaining
    handlers still run.

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe(BiometricsUpdated, handler.handle)
        >>> await bus.publish(BiometricsUpdated.create("user123", ["weight"]))
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[Callable[[Any], Awaitable[None]]]] = {}

    def subscribe(
        self,
        event_type: Type[TEvent],
        handler: Callable[[TEvent], Awaitable[None]],
    ) -> None:
        """
        Subscribe a handler to an event type.

        Note:
            - Same handler can be subscribed multiple times
            - Handlers are called in subscription order
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "event_bus.subscribed",
            event_type=event_type.__name__,
            handler=getattr(handler, "__qualname__", repr(handler)),
        )

    async def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        handlers = self._handlers.get(event_type, [])

        if not handlers:
            logger.debug("event_bus.no_handlers", event_type=event_type.__name__)
            return

        logger.info(
            "event_bus.publishing",
            event_type=event_type.__name__,
            event_id=str(event.event_id),
            handler_count=len(handlers),
        )

        for handler in list(handlers):
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "event_bus.handler_failed",
                    event_type=event_type.__name__,
                    event_id=str(event.event_id),
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
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
            True if handler was found and removed, False otherwise
        """
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def clear(self) -> None:
        """Remove all subscriptions (testing utility)."""
        self._handlers.clear()

    def get_handler_count(self, event_type: Type[TEvent]) -> int:
        return len(self._handlers.get(event_type, []))
