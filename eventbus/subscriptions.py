"""In-memory subscription registry: event key -> ordered handler records.

Thread-safe: every mutation and read takes the registry lock. Removal
listeners run after the lock is released, before the mutating call returns.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable

from eventbus.errors import DuplicateHandlerError, UnknownEventError

logger = logging.getLogger(__name__)

__all__ = ["HandlerId", "RemovalListener", "SubscriptionInfo", "SubscriptionRegistry"]

# A handler is identified by a name or by its class.
HandlerId = str | type
RemovalListener = Callable[[str], Any]


@dataclass(frozen=True)
class SubscriptionInfo:
    """One handler registration under an event key."""

    handler_id: HandlerId

    def __post_init__(self) -> None:
        if self.handler_id is None or self.handler_id == "":
            raise ValueError("handler_id is required")

    @classmethod
    def typed(cls, handler_type: type) -> "SubscriptionInfo":
        return cls(handler_type)

    @property
    def handler_name(self) -> str:
        return getattr(self.handler_id, "__name__", str(self.handler_id))


class SubscriptionRegistry:
    """Owns handler registrations and event types for one bus instance."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[SubscriptionInfo]] = {}
        self._event_types: dict[str, type] = {}
        self._removal_listeners: list[RemovalListener] = []
        self._lock = threading.RLock()

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return not self._handlers

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def __contains__(self, event_key: object) -> bool:
        with self._lock:
            return event_key in self._handlers

    def add_removal_listener(self, listener: RemovalListener) -> None:
        """Call listener(event_key) whenever the last handler of a key is removed."""
        with self._lock:
            self._removal_listeners.append(listener)

    def remove_removal_listener(self, listener: RemovalListener) -> None:
        with self._lock:
            if listener in self._removal_listeners:
                self._removal_listeners.remove(listener)

    def add_subscription(
        self, event_key: str, event_type: type, handler_id: HandlerId
    ) -> SubscriptionInfo:
        """Register handler_id for event_key. Raises DuplicateHandlerError."""
        info = SubscriptionInfo(handler_id)
        with self._lock:
            handlers = self._handlers.get(event_key)
            if handlers is not None and any(
                s.handler_id == handler_id for s in handlers
            ):
                raise DuplicateHandlerError(event_key, handler_id)
            if handlers is None:
                handlers = self._handlers[event_key] = []
            handlers.append(info)
            recorded = self._event_types.setdefault(event_key, event_type)
        if recorded is not event_type:
            logger.warning(
                "Event key '%s' already maps to %s; %s handler %s will receive %s instances",
                event_key,
                recorded.__name__,
                event_type.__name__,
                info.handler_name,
                recorded.__name__,
            )
        logger.debug("Subscribed %s to '%s'", info.handler_name, event_key)
        return info

    def remove_subscription(self, event_key: str, handler_id: HandlerId) -> bool:
        """Remove handler_id from event_key. Returns False if nothing was registered."""
        with self._lock:
            handlers = self._handlers.get(event_key)
            if not handlers:
                return False
            match = next((s for s in handlers if s.handler_id == handler_id), None)
            if match is None:
                return False
            handlers.remove(match)
            purged = not handlers
            if purged:
                del self._handlers[event_key]
                self._event_types.pop(event_key, None)
            listeners = list(self._removal_listeners) if purged else []
        logger.debug("Unsubscribed %s from '%s'", match.handler_name, event_key)
        if purged:
            logger.debug("Last handler removed for '%s'", event_key)
            for listener in listeners:
                listener(event_key)
        return True

    def has_subscriptions(self, event_key: str) -> bool:
        with self._lock:
            return event_key in self._handlers

    def handlers_for(self, event_key: str) -> tuple[SubscriptionInfo, ...]:
        """Snapshot of handlers in registration order. Raises UnknownEventError."""
        with self._lock:
            handlers = self._handlers.get(event_key)
            if not handlers:
                raise UnknownEventError(event_key)
            return tuple(handlers)

    def snapshot(
        self, event_key: str
    ) -> tuple[tuple[SubscriptionInfo, ...], type] | None:
        """Handlers and event type for event_key read under one lock hold; None if unsubscribed."""
        with self._lock:
            handlers = self._handlers.get(event_key)
            if not handlers:
                return None
            return tuple(handlers), self._event_types[event_key]

    def event_type_for(self, event_key: str) -> type | None:
        with self._lock:
            return self._event_types.get(event_key)

    def event_type_by_name(self, type_name: str) -> type | None:
        """Find a registered event type by its class name."""
        with self._lock:
            return next(
                (t for t in self._event_types.values() if t.__name__ == type_name),
                None,
            )

    def event_keys(self) -> list[str]:
        with self._lock:
            return list(self._handlers)

    def clear(self) -> None:
        """Drop every registration. Removal listeners are not notified."""
        with self._lock:
            self._handlers.clear()
            self._event_types.clear()
