"""In-process loopback backend: publish -> asyncio queue -> receive loop -> dispatch.

Useful for tests and single-process deployments. Only topics with at least one
subscription are bound; messages published to unbound topics are dropped, as a
broker would drop messages with no bound queue.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass

from eventbus.bus import BaseEventBus
from eventbus.config import EventBusConfig
from eventbus.contract import EventSerializer, HandlerResolver
from eventbus.events.models import IntegrationEvent
from eventbus.resolver import HandlerContainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InMemoryMessage:
    """Message as it travels through the loopback queue."""

    topic: str
    event_name: str
    payload: str


class InMemoryEventBus(BaseEventBus):
    """Queue-backed bus. Call start() to run the receive loop."""

    def __init__(
        self,
        config: EventBusConfig | None = None,
        resolver: HandlerResolver | None = None,
        serializer: EventSerializer | None = None,
    ) -> None:
        super().__init__(
            config or EventBusConfig(),
            resolver if resolver is not None else HandlerContainer(),
            serializer,
        )
        self._queue: asyncio.Queue[InMemoryMessage] = asyncio.Queue()
        self._topics: set[str] = set()
        self._topics_lock = threading.Lock()
        self._receive_task: asyncio.Task[None] | None = None
        self.dead_letters: list[tuple[InMemoryMessage, Exception]] = []

    @property
    def resolver(self) -> HandlerResolver:
        return self._resolver

    @property
    def topics(self) -> frozenset[str]:
        """Currently bound topics (event keys with subscribers)."""
        with self._topics_lock:
            return frozenset(self._topics)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def publish(self, event: IntegrationEvent) -> None:
        self._ensure_active()
        topic = self.event_key_for(event)
        with self._topics_lock:
            bound = topic in self._topics
        if not bound:
            logger.debug("No binding for topic '%s', dropping %s", topic, event.id)
            return
        message = InMemoryMessage(
            topic=topic,
            event_name=type(event).event_name(),
            payload=self._serializer.serialize(event),
        )
        await self._queue.put(message)

    async def start(self) -> None:
        """Start the receive loop as an asyncio Task."""
        self._ensure_active()
        if self._receive_task is not None and not self._receive_task.done():
            return
        self._receive_task = asyncio.create_task(self._receive_loop())
        logger.info("InMemoryEventBus receive loop started")

    async def stop(self) -> None:
        """Stop the receive loop. Queued messages stay queued."""
        if self._receive_task:
            self._receive_task.cancel()
            try:
                await self._receive_task
            except asyncio.CancelledError:
                pass
            self._receive_task = None
            logger.info("InMemoryEventBus stopped")

    async def join(self) -> None:
        """Wait until every queued message has been processed."""
        await self._queue.join()

    def dispose(self) -> None:
        """Clear subscriptions and bindings. Await stop() first when the loop is running."""
        task, self._receive_task = self._receive_task, None
        if task is not None and not task.done():
            logger.warning("InMemoryEventBus disposed without stop(); cancelling receive loop")
            task.cancel()
        with self._topics_lock:
            self._topics.clear()
        super().dispose()

    def _bind(self, event_key: str, event_type: type[IntegrationEvent]) -> None:
        with self._topics_lock:
            if event_key in self._topics:
                return
            self._topics.add(event_key)
        logger.debug("Bound topic '%s'", event_key)

    def _on_event_removed(self, event_key: str) -> None:
        # A concurrent subscribe may have re-registered the key before this notice ran.
        with self._topics_lock:
            if self._registry.has_subscriptions(event_key):
                return
            self._topics.discard(event_key)
        logger.debug("Unbound topic '%s'", event_key)

    async def _receive_loop(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                processed = await self.process_event(message.event_name, message.payload)
                if not processed:
                    logger.debug("No handlers for '%s', message discarded", message.topic)
            except Exception as e:
                self.dead_letters.append((message, e))
                logger.exception(
                    "InMemoryEventBus: dispatch failed for '%s': %s", message.topic, e
                )
            finally:
                self._queue.task_done()
