"""Collaborator protocols: event handlers, handler resolution, serialization.

The dispatch core only depends on these shapes; containers and wire formats
are supplied by the application or the transport backend.
"""

from typing import Any, Awaitable, Protocol, TypeVar, runtime_checkable

from eventbus.events.models import IntegrationEvent

TEvent = TypeVar("TEvent", bound=IntegrationEvent)


@runtime_checkable
class IntegrationEventHandler(Protocol):
    """Handles one integration event type."""

    def handle(self, event: Any) -> Awaitable[None] | None:
        """Process the event. Coroutine functions are awaited by the dispatcher."""


@runtime_checkable
class HandlerResolver(Protocol):
    """Resolves a live handler instance from a handler identifier."""

    def resolve(self, handler_id: Any) -> Any | None:
        """Return a handler instance, or None when it is not available."""


@runtime_checkable
class EventSerializer(Protocol):
    """Converts events to and from their wire representation."""

    def serialize(self, event: IntegrationEvent) -> str:
        """Encode an event as a string payload."""

    def deserialize(self, payload: str | bytes, target_type: type[TEvent]) -> TEvent:
        """Decode payload into target_type. Raises DeserializationError."""
