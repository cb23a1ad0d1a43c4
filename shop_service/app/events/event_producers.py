"""
Shop Service Event Producers
============================

Publishes quantity probes for newly created products on ``store_control``.
"""

from typing import Optional

from product_sync.events import STORE_CONTROL_TOPIC, EventPublisher, ProductMessage
from product_sync.utils.logging import setup_logging

from ..core.setting import get_settings

logger = setup_logging("shop_service.events.producers", log_level=get_settings().LOG_LEVEL)


class ShopEventProducer:
    """Publishes shop-side product messages to the warehouse"""

    def __init__(self, publisher: EventPublisher, topic: str = STORE_CONTROL_TOPIC):
        self.publisher = publisher
        self.topic = topic

    async def publish_product_quantity(
        self,
        product_id: int,
        quantity: int,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Ask the warehouse for its quantity of ``product_id``"""
        message = ProductMessage(id=product_id, quantity=quantity)

        logger.info(
            "Sending product message",
            extra={
                "topic": self.topic,
                "product_id": product_id,
                "quantity": quantity,
                "correlation_id": correlation_id,
            },
        )

        await self.publisher.publish(message, topic=self.topic)
