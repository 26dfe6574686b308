"""Event bus port (interface)."""

from typing import Awaitable, Callable, Protocol, Type, TypeVar

from ..events.base import DomainEvent

TEvent = TypeVar("TEvent", bound=DomainEvent)

EventHandler = Callable[[TEvent], Awaitable[None]]


class IEventBus(Protocol):
    """Interface for event publishing and subscription.

    Example usage (application layer):
        >>> event_bus.subscribe(BiometricsUpdated, handler.handle)
        >>> await event_bus.publish(BiometricsUpdated.create("u1", ["weight"]))
    """

    def subscribe(self, event_type: Type[TEvent], handler: EventHandler[TEvent]) -> None:
        """Subscribe a handler to an event type."""
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribed handlers.

        Note:
            - Handlers are called in subscription order
            - If a handler fails, other handlers still execute
        """
        ...

    def unsubscribe(self, event_type: Type[TEvent], handler: EventHandler[TEvent]) -> bool:
        """Unsubscribe a handler; True if it was registered."""
        ...
