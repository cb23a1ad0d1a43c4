"""
Warehouse Service Event Producers
=================================
"""

from product_sync.events import STORE_STATUS_TOPIC, EventPublisher, ProductMessage
from product_sync.utils.logging import setup_logging

from ..core.setting import get_settings

logger = setup_logging(
    "warehouse_service.events.producers", log_level=get_settings().LOG_LEVEL
)


class WarehouseEventProducer:
    """Publishes the warehouse view of a product's quantity to the shop"""

    def __init__(self, publisher: EventPublisher, topic: str = STORE_STATUS_TOPIC):
        self.publisher = publisher
        self.topic = topic

    async def publish_stock_status(self, product_id: int, quantity: int) -> None:
        """Send the stored quantity. Publish errors propagate to the caller."""
        await self.publisher.publish(
            ProductMessage(id=product_id, quantity=quantity), topic=self.topic
        )
        logger.info(
            "Sent product message",
            extra={"topic": self.topic, "product_id": product_id, "quantity": quantity},
        )
