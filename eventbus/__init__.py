"""Provider-agnostic integration event bus core.

Registration, event-name normalization and inbound dispatch; transport
backends plug in by subclassing BaseEventBus.
"""

from eventbus.bus import BaseEventBus
from eventbus.config import BusType, EventBusConfig, load_config
from eventbus.contract import EventSerializer, HandlerResolver, IntegrationEventHandler
from eventbus.dispatch import DispatchCore
from eventbus.errors import (
    BusDisposedError,
    DeserializationError,
    DispatchCancelledError,
    DuplicateHandlerError,
    EventBusError,
    UnknownEventError,
)
from eventbus.events import EventNameNormalizer, IntegrationEvent
from eventbus.events.naming import TrimMode
from eventbus.memory import InMemoryEventBus
from eventbus.resolver import HandlerContainer
from eventbus.serializer import JsonEventSerializer
from eventbus.subscriptions import SubscriptionInfo, SubscriptionRegistry

__all__ = [
    "BaseEventBus",
    "BusDisposedError",
    "BusType",
    "DeserializationError",
    "DispatchCancelledError",
    "DispatchCore",
    "DuplicateHandlerError",
    "EventBusConfig",
    "EventBusError",
    "EventNameNormalizer",
    "EventSerializer",
    "HandlerContainer",
    "HandlerResolver",
    "InMemoryEventBus",
    "IntegrationEvent",
    "IntegrationEventHandler",
    "JsonEventSerializer",
    "SubscriptionInfo",
    "SubscriptionRegistry",
    "TrimMode",
    "UnknownEventError",
    "load_config",
]
