"""Minimal handler container used as the default HandlerResolver."""

import logging
import threading
from typing import Any, Callable

from eventbus.subscriptions import HandlerId

logger = logging.getLogger(__name__)


class HandlerContainer:
    """Maps handler identifiers to factories or ready instances.

    Transient registrations build a new handler per resolve() call; singleton
    registrations build once and reuse the instance. Unknown ids resolve to None.
    """

    def __init__(self) -> None:
        self._factories: dict[HandlerId, tuple[Callable[[], Any], bool]] = {}
        self._instances: dict[HandlerId, Any] = {}
        self._lock = threading.Lock()

    def register(
        self,
        handler_id: HandlerId,
        factory: Callable[[], Any] | None = None,
        *,
        singleton: bool = False,
    ) -> None:
        """Register a factory. A class id without factory is its own factory."""
        if factory is None:
            if not isinstance(handler_id, type):
                raise TypeError(f"factory is required for handler id {handler_id!r}")
            factory = handler_id
        with self._lock:
            self._factories[handler_id] = (factory, singleton)
            self._instances.pop(handler_id, None)

    def register_instance(self, handler_id: HandlerId, instance: Any) -> None:
        with self._lock:
            self._factories.pop(handler_id, None)
            self._instances[handler_id] = instance

    def unregister(self, handler_id: HandlerId) -> None:
        with self._lock:
            self._factories.pop(handler_id, None)
            self._instances.pop(handler_id, None)

    def __contains__(self, handler_id: object) -> bool:
        return handler_id in self._factories or handler_id in self._instances

    def resolve(self, handler_id: HandlerId) -> Any | None:
        with self._lock:
            if handler_id in self._instances:
                return self._instances[handler_id]
            entry = self._factories.get(handler_id)
            if entry is None:
                logger.debug("No handler registered for %r", handler_id)
                return None
            factory, singleton = entry
            instance = factory()
            if singleton:
                self._instances[handler_id] = instance
            return instance
