"""
Warehouse Service Event Consumers
=================================

Answers ``store_control`` probes from the shop.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_sync.events import (
    STORE_CONTROL_TOPIC,
    EventHandler,
    EventSubscriber,
    ProductMessage,
)
from product_sync.utils.logging import setup_logging

from ..core.setting import get_settings
from ..services.inventory_service import InventoryService
from .event_producers import WarehouseEventProducer

logger = setup_logging(
    "warehouse_service.events.consumers", log_level=get_settings().LOG_LEVEL
)


class StockControlHandler(EventHandler):
    """Resolves the probed id in the projection and replies with its quantity"""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        event_producer: WarehouseEventProducer,
        seed_quantity_from_control: bool = False,
    ):
        self.session_maker = session_maker
        self.event_producer = event_producer
        self.seed_quantity_from_control = seed_quantity_from_control

    async def handle(self, message: ProductMessage) -> None:
        logger.info(
            "Received product message",
            extra={"product_id": message.id, "quantity": message.quantity},
        )

        seed_quantity = message.quantity if self.seed_quantity_from_control else 0

        # Store and publish errors propagate so the probe is redelivered;
        # materialization is conditional, so a retry is harmless
        async with self.session_maker() as session:
            service = InventoryService(session, self.event_producer)
            await service.check_quantity_and_send_status(
                message.id, seed_quantity=seed_quantity
            )


class WarehouseEventConsumer:
    """Wires warehouse handlers onto a subscriber"""

    def __init__(
        self,
        subscriber: EventSubscriber,
        session_maker: async_sessionmaker[AsyncSession],
        event_producer: WarehouseEventProducer,
        topic: str = STORE_CONTROL_TOPIC,
        seed_quantity_from_control: bool = False,
    ):
        self.subscriber = subscriber
        self.topic = topic
        self.handler = StockControlHandler(
            session_maker,
            event_producer,
            seed_quantity_from_control=seed_quantity_from_control,
        )

    async def start(self) -> None:
        await self.subscriber.start()
        await self.subscriber.subscribe(topic=self.topic, handler=self.handler)
        logger.info(
            "Started consuming warehouse service events",
            extra={"subscriptions": [f"{self.topic}:StockControlHandler"]},
        )

    async def stop(self) -> None:
        await self.subscriber.stop()
