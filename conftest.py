"""
Pytest configuration and fixtures shared by every test suite.

Provides bus doubles that stand in for Kafka: a recording publisher for
tests that only look at what was sent, and an in-memory bus that routes
published messages to subscribed handlers for end-to-end replication.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from product_sync.events import (
    EventHandler,
    EventPublisher,
    EventPublishError,
    EventSubscriber,
    ProductMessage,
)


class RecordingPublisher(EventPublisher):
    """Keeps every published message; raises EventPublishError when ``failing``."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, ProductMessage]] = []
        self.failing = False
        self.started = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.started = False

    async def publish(self, message: ProductMessage, topic: str) -> None:
        if self.failing:
            raise EventPublishError(topic, message, "broker unavailable")
        self.messages.append((topic, message))

    def on(self, topic: str) -> List[ProductMessage]:
        return [message for t, message in self.messages if t == topic]


class InMemoryBus:
    """
    Ordered in-memory transport for replication tests.

    Publishing only enqueues; ``drain`` delivers pending messages to the
    handlers subscribed to their topic until nothing is left.
    """

    def __init__(self) -> None:
        self.pending: List[Tuple[str, ProductMessage]] = []
        self.log: List[Tuple[str, ProductMessage]] = []
        self.handlers: Dict[str, List[EventHandler]] = {}

    def publisher(self) -> "BusPublisher":
        return BusPublisher(self)

    def subscriber(self) -> "BusSubscriber":
        return BusSubscriber(self)

    def inject(self, topic: str, message: ProductMessage) -> None:
        self.pending.append((topic, message))
        self.log.append((topic, message))

    def on(self, topic: str) -> List[ProductMessage]:
        return [message for t, message in self.log if t == topic]

    async def deliver_next(self) -> Optional[Tuple[str, ProductMessage]]:
        """Deliver the oldest pending message; it stays queued if a handler fails"""
        if not self.pending:
            return None
        topic, message = self.pending[0]
        for handler in self.handlers.get(topic, []):
            await handler.handle(message)
        self.pending.pop(0)
        return topic, message

    async def drain(self, max_deliveries: int = 100) -> int:
        delivered = 0
        while self.pending and delivered < max_deliveries:
            await self.deliver_next()
            delivered += 1
        return delivered


class BusPublisher(EventPublisher):
    def __init__(self, bus: InMemoryBus) -> None:
        self.bus = bus

    async def publish(self, message: ProductMessage, topic: str) -> None:
        self.bus.inject(topic, message)


class BusSubscriber(EventSubscriber):
    def __init__(self, bus: InMemoryBus) -> None:
        self.bus = bus
        self.subscriptions: List[Tuple[str, EventHandler]] = []

    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        self.bus.handlers.setdefault(topic, []).append(handler)
        self.subscriptions.append((topic, handler))

    async def stop(self) -> None:
        for topic, handler in self.subscriptions:
            self.bus.handlers[topic].remove(handler)
        self.subscriptions.clear()


@pytest.fixture
def recording_publisher() -> RecordingPublisher:
    """Publisher double that records instead of sending."""
    return RecordingPublisher()


@pytest.fixture
def in_memory_bus() -> InMemoryBus:
    """Shared transport connecting shop and warehouse in one process."""
    return InMemoryBus()
