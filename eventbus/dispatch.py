"""Dispatch pipeline: event name -> registry lookup -> resolve -> deserialize -> handle."""

import asyncio
import inspect
import logging
from typing import Any

from eventbus.contract import EventSerializer, HandlerResolver
from eventbus.errors import DispatchCancelledError
from eventbus.events.naming import EventNameNormalizer
from eventbus.subscriptions import SubscriptionRegistry

logger = logging.getLogger(__name__)


class DispatchCore:
    """Routes one inbound message to every registered handler for its event key.

    Handlers run sequentially in registration order and share one deserialized
    event instance. Handler exceptions are not caught here.
    """

    def __init__(
        self,
        registry: SubscriptionRegistry,
        normalizer: EventNameNormalizer,
        resolver: HandlerResolver,
        serializer: EventSerializer,
    ) -> None:
        self._registry = registry
        self._normalizer = normalizer
        self._resolver = resolver
        self._serializer = serializer

    async def process_event(
        self,
        event_name: str,
        payload: str | bytes,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> bool:
        """Dispatch payload to handlers of event_name. Returns False if nobody subscribed.

        When cancellation is set, DispatchCancelledError is raised before the
        next handler starts; a running handler is never interrupted.
        """
        event_key = self._normalizer.normalize(event_name)
        snapshot = self._registry.snapshot(event_key)
        if snapshot is None:
            logger.debug("No subscriptions for '%s' (raw name %s)", event_key, event_name)
            return False
        subscriptions, event_type = snapshot

        event: Any = None
        invoked = 0
        for subscription in subscriptions:
            if cancellation is not None and cancellation.is_set():
                raise DispatchCancelledError(event_key, invoked)
            handler = self._resolver.resolve(subscription.handler_id)
            if handler is None:
                logger.debug(
                    "Handler %s not resolvable for '%s', skipping",
                    subscription.handler_name,
                    event_key,
                )
                continue
            if event is None:
                event = self._serializer.deserialize(payload, event_type)
            result = handler.handle(event)
            if inspect.isawaitable(result):
                await result
            invoked += 1

        logger.debug("Dispatched '%s' to %d handler(s)", event_key, invoked)
        return True

