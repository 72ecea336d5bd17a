"""Error hierarchy for the event bus core."""

from typing import Any


class EventBusError(Exception):
    """Base class for all event bus errors."""


class DuplicateHandlerError(EventBusError, ValueError):
    """Raised when a handler is registered twice for the same event key."""

    def __init__(self, event_key: str, handler_id: Any) -> None:
        name = getattr(handler_id, "__name__", handler_id)
        super().__init__(f"Handler {name} already registered for '{event_key}'")
        self.event_key = event_key
        self.handler_id = handler_id


class UnknownEventError(EventBusError, KeyError):
    """Raised when handlers are requested for an event key with no subscriptions."""

    def __init__(self, event_key: str) -> None:
        super().__init__(event_key)
        self.event_key = event_key

    def __str__(self) -> str:
        return f"No subscriptions registered for '{self.event_key}'"


class DeserializationError(EventBusError):
    """Raised when a payload cannot be turned into the expected event type."""

    def __init__(
        self, target_type: type | None, message: str, *, cause: Exception | None = None
    ) -> None:
        name = getattr(target_type, "__name__", repr(target_type))
        super().__init__(f"Cannot deserialize payload into {name}: {message}")
        self.target_type = target_type
        self.cause = cause


class DispatchCancelledError(EventBusError):
    """Raised when dispatch is cancelled between two handler invocations."""

    def __init__(self, event_key: str, completed: int) -> None:
        super().__init__(
            f"Dispatch of '{event_key}' cancelled after {completed} handler(s)"
        )
        self.event_key = event_key
        self.completed = completed


class BusDisposedError(EventBusError):
    """Raised when a disposed bus is used."""
