"""Event bus facade: registration, naming and inbound dispatch shared by backends.

Transport backends subclass BaseEventBus, implement publish(), and call
process_event() from their receive loop. Optional hooks let them bind and
unbind transport resources as event keys appear and disappear.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from eventbus.config import EventBusConfig
from eventbus.contract import EventSerializer, HandlerResolver
from eventbus.dispatch import DispatchCore
from eventbus.errors import BusDisposedError
from eventbus.events.models import IntegrationEvent
from eventbus.events.naming import EventNameNormalizer
from eventbus.serializer import JsonEventSerializer
from eventbus.subscriptions import HandlerId, SubscriptionRegistry

logger = logging.getLogger(__name__)


class BaseEventBus(ABC):
    """Provider-agnostic core of an event bus. One registry per instance."""

    def __init__(
        self,
        config: EventBusConfig,
        resolver: HandlerResolver,
        serializer: EventSerializer | None = None,
    ) -> None:
        self._config: EventBusConfig | None = config
        self._resolver = resolver
        self._serializer: EventSerializer = serializer or JsonEventSerializer()
        self._normalizer = EventNameNormalizer.from_config(config)
        self._registry = SubscriptionRegistry()
        self._registry.add_removal_listener(self._on_event_removed)
        self._dispatcher = DispatchCore(
            self._registry, self._normalizer, resolver, self._serializer
        )
        self._disposed = False

    @property
    def config(self) -> EventBusConfig | None:
        """Active configuration; None once the bus is disposed."""
        return self._config

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def normalizer(self) -> EventNameNormalizer:
        return self._normalizer

    @property
    def serializer(self) -> EventSerializer:
        return self._serializer

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def event_key(self, event_name: str) -> str:
        return self._normalizer.normalize(event_name)

    def event_key_for(self, event: IntegrationEvent | type[IntegrationEvent]) -> str:
        """Topic/routing name for an event instance or type."""
        event_type = event if isinstance(event, type) else type(event)
        return self._normalizer.normalize(event_type.event_name())

    def subscription_name(self, event_name: str) -> str:
        return self._normalizer.subscription_name(event_name)

    @abstractmethod
    async def publish(self, event: IntegrationEvent) -> None:
        """Serialize event and send it to the topic named by event_key_for(event)."""

    def subscribe(
        self, event_type: type[IntegrationEvent], handler_type: HandlerId
    ) -> None:
        """Register handler_type for event_type. Raises DuplicateHandlerError."""
        self._ensure_active()
        _check_subscription_types(event_type, handler_type)
        event_key = self.event_key_for(event_type)
        self._registry.add_subscription(event_key, event_type, handler_type)
        try:
            self._bind(event_key, event_type)
        except Exception:
            self._registry.remove_subscription(event_key, handler_type)
            raise
        logger.info(
            "Subscribed %s to %s ('%s')",
            getattr(handler_type, "__name__", handler_type),
            event_type.__name__,
            event_key,
        )

    def unsubscribe(
        self, event_type: type[IntegrationEvent], handler_type: HandlerId
    ) -> None:
        """Remove a registration. Unknown pairs are ignored."""
        self._ensure_active()
        event_key = self.event_key_for(event_type)
        if self._registry.remove_subscription(event_key, handler_type):
            logger.info(
                "Unsubscribed %s from %s ('%s')",
                getattr(handler_type, "__name__", handler_type),
                event_type.__name__,
                event_key,
            )

    async def process_event(
        self,
        event_name: str,
        payload: str | bytes,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> bool:
        """Dispatch one inbound message. Returns False when nobody subscribed."""
        self._ensure_active()
        return await self._dispatcher.process_event(
            event_name, payload, cancellation=cancellation
        )

    def dispose(self) -> None:
        """Clear all subscriptions and release the configuration. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._registry.clear()
        self._config = None
        logger.info("Event bus disposed")

    def __enter__(self) -> "BaseEventBus":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    def _bind(self, event_key: str, event_type: type[IntegrationEvent]) -> None:
        """Transport hook: called after each successful subscribe. Default: no-op."""

    def _on_event_removed(self, event_key: str) -> None:
        """Transport hook: the last handler for event_key was removed. Default: no-op."""

    def _ensure_active(self) -> None:
        if self._disposed:
            raise BusDisposedError("event bus is disposed")


def _check_subscription_types(event_type: Any, handler_type: Any) -> None:
    if not (isinstance(event_type, type) and issubclass(event_type, IntegrationEvent)):
        raise TypeError(f"{event_type!r} is not an IntegrationEvent type")
    if isinstance(handler_type, str):
        if not handler_type:
            raise ValueError("handler name must not be empty")
        return
    if not callable(getattr(handler_type, "handle", None)):
        raise TypeError(f"{handler_type!r} does not define handle(event)")
