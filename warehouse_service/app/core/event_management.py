"""
Warehouse Service Event Management
Owns the Kafka publisher, the store_status producer and the store_control consumer.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_sync.events import EventPublisher, EventSubscriber
from product_sync.events.kafka_client import KafkaEventPublisher, KafkaEventSubscriber
from product_sync.utils.logging import setup_logging

from ..events.event_consumers import WarehouseEventConsumer
from ..events.event_producers import WarehouseEventProducer
from .setting import WarehouseSettings, get_settings

logger = setup_logging("warehouse_service.events", log_level=get_settings().LOG_LEVEL)


class WarehouseEventManager:
    """
    Event infrastructure of one warehouse process.

    The Kafka publisher runs without graceful degradation: a reply that
    cannot be published fails the handler and the probe is redelivered.
    """

    def __init__(
        self,
        settings: WarehouseSettings,
        publisher: Optional[EventPublisher] = None,
        subscriber: Optional[EventSubscriber] = None,
    ):
        self.settings = settings
        self.publisher = publisher
        self.subscriber = subscriber
        self.event_producer: Optional[WarehouseEventProducer] = None
        self.event_consumer: Optional[WarehouseEventConsumer] = None

    async def init_events(self) -> None:
        """Initialize event publishing infrastructure"""
        settings = self.settings

        logger.info(
            "Initializing event publishing infrastructure",
            extra={
                "operation": "init_events",
                "kafka_servers": settings.KAFKA_BOOTSTRAP_SERVERS,
                "topic": settings.KAFKA_TOPIC_STORE_STATUS,
            },
        )

        if self.publisher is None:
            self.publisher = KafkaEventPublisher(
                bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
                client_id=f"{settings.SERVICE_NAME}-producer",
                service_name="warehouse_service",
                log_level=settings.LOG_LEVEL,
                max_retries=settings.KAFKA_CONNECT_RETRIES,
                retry_delay=settings.KAFKA_RETRY_DELAY,
                topic_partitions=settings.KAFKA_TOPIC_PARTITIONS,
                enable_graceful_degradation=False,
            )

        await self.publisher.start()
        self.event_producer = WarehouseEventProducer(
            self.publisher, topic=settings.KAFKA_TOPIC_STORE_STATUS
        )

    async def init_consumer(
        self, session_maker: async_sessionmaker[AsyncSession]
    ) -> None:
        """Start consuming store_control"""
        settings = self.settings
        if self.event_producer is None:
            raise RuntimeError("Event producer not initialized")

        if self.subscriber is None:
            self.subscriber = KafkaEventSubscriber(
                bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
                group_id=settings.KAFKA_GROUP_ID,
                client_id=f"{settings.SERVICE_NAME}-consumer",
                service_name="warehouse_service",
                log_level=settings.LOG_LEVEL,
                max_retries=settings.KAFKA_CONNECT_RETRIES,
                retry_delay=settings.KAFKA_RETRY_DELAY,
                redelivery_delay=settings.KAFKA_REDELIVERY_DELAY,
            )

        self.event_consumer = WarehouseEventConsumer(
            self.subscriber,
            session_maker,
            self.event_producer,
            topic=settings.KAFKA_TOPIC_STORE_CONTROL,
            seed_quantity_from_control=settings.SEED_QUANTITY_FROM_CONTROL,
        )
        await self.event_consumer.start()

    async def close_events(self) -> None:
        """Stop consumer and publisher"""
        if self.event_consumer:
            await self.event_consumer.stop()
            self.event_consumer = None

        if self.publisher:
            await self.publisher.stop()
            logger.info(
                "Event publishing infrastructure closed",
                extra={"operation": "close_events_complete"},
            )
        self.event_producer = None

    async def health_check_events(self) -> bool:
        """Publisher reachable and, when consuming, every consumer task alive"""
        if self.publisher is None:
            return False
        if not await self.publisher.health_check():
            return False
        if self.event_consumer is not None:
            return await self.event_consumer.subscriber.health_check()
        return True
