"""
Event infrastructure base classes and interfaces.
"""

from abc import ABC, abstractmethod

from .product_message import ProductMessage


class EventPublishError(Exception):
    """Raised when a message could not be handed to the bus"""

    def __init__(self, topic: str, message: ProductMessage, reason: str):
        super().__init__(
            f"Failed to publish product {message.id} to {topic}: {reason}"
        )
        self.topic = topic
        self.message = message
        self.reason = reason


class EventHandler(ABC):
    """Abstract base class for message handlers"""

    @abstractmethod
    async def handle(self, message: ProductMessage) -> None:
        """Handle the message"""
        pass


class EventPublisher(ABC):
    """Abstract base class for message publishers"""

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def health_check(self) -> bool:
        return True

    @abstractmethod
    async def publish(self, message: ProductMessage, topic: str) -> None:
        """Publish a message to ``topic`` keyed by product id"""
        pass


class EventSubscriber(ABC):
    """Abstract base class for message subscribers"""

    @abstractmethod
    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Subscribe a handler to a topic"""
        pass

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def health_check(self) -> bool:
        return True
