"""
Shop Service Event Consumers
============================

Applies warehouse quantity replies from ``store_status`` to the catalog.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_sync.events import (
    STORE_STATUS_TOPIC,
    EventHandler,
    EventSubscriber,
    ProductMessage,
)
from product_sync.utils.logging import setup_logging

from ..core.setting import get_settings
from ..services.product_service import ProductService

logger = setup_logging("shop_service.events.consumers", log_level=get_settings().LOG_LEVEL)


class ProductStatusHandler(EventHandler):
    """Blind-writes the warehouse quantity onto the product, if it still exists"""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def handle(self, message: ProductMessage) -> None:
        logger.info(
            "Received product message",
            extra={"product_id": message.id, "quantity": message.quantity},
        )

        # Store errors propagate so the subscriber redelivers the message
        async with self.session_maker() as session:
            service = ProductService(session)
            await service.apply_quantity_update(message.id, message.quantity)


class ShopEventConsumer:
    """Wires shop handlers onto a subscriber"""

    def __init__(
        self,
        subscriber: EventSubscriber,
        session_maker: async_sessionmaker[AsyncSession],
        topic: str = STORE_STATUS_TOPIC,
    ):
        self.subscriber = subscriber
        self.session_maker = session_maker
        self.topic = topic

    async def start(self) -> None:
        await self.subscriber.start()
        await self.subscriber.subscribe(
            topic=self.topic, handler=ProductStatusHandler(self.session_maker)
        )
        logger.info(
            "Started consuming shop service events",
            extra={"subscriptions": [f"{self.topic}:ProductStatusHandler"]},
        )

    async def stop(self) -> None:
        await self.subscriber.stop()
