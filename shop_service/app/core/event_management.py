"""
Shop Service Event Management
Owns the Kafka publisher, the store_control producer and the store_status consumer.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from product_sync.events import EventPublisher, EventSubscriber
from product_sync.events.kafka_client import KafkaEventPublisher, KafkaEventSubscriber
from product_sync.utils.logging import setup_logging

from ..events.event_consumers import ShopEventConsumer
from ..events.event_producers import ShopEventProducer
from .setting import ShopSettings, get_settings

logger = setup_logging("shop_service.events", log_level=get_settings().LOG_LEVEL)


class ShopEventManager:
    """
    Event infrastructure of one shop process.

    A publisher or subscriber passed in is used as is; otherwise Kafka
    clients are built from settings.
    """

    def __init__(
        self,
        settings: ShopSettings,
        publisher: Optional[EventPublisher] = None,
        subscriber: Optional[EventSubscriber] = None,
    ):
        self.settings = settings
        self.publisher = publisher
        self.subscriber = subscriber
        self.event_producer: Optional[ShopEventProducer] = None
        self.event_consumer: Optional[ShopEventConsumer] = None

    async def init_events(self) -> None:
        """Initialize event publishing infrastructure"""
        settings = self.settings

        logger.info(
            "Initializing event publishing infrastructure",
            extra={
                "operation": "init_events",
                "kafka_servers": settings.KAFKA_BOOTSTRAP_SERVERS,
                "topic": settings.KAFKA_TOPIC_STORE_CONTROL,
            },
        )

        if self.publisher is None:
            self.publisher = KafkaEventPublisher(
                bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
                client_id=f"{settings.SERVICE_NAME}-producer",
                service_name="shop_service",
                log_level=settings.LOG_LEVEL,
                max_retries=settings.KAFKA_CONNECT_RETRIES,
                retry_delay=settings.KAFKA_RETRY_DELAY,
                topic_partitions=settings.KAFKA_TOPIC_PARTITIONS,
                enable_graceful_degradation=settings.KAFKA_GRACEFUL_DEGRADATION,
            )

        await self.publisher.start()
        self.event_producer = ShopEventProducer(
            self.publisher, topic=settings.KAFKA_TOPIC_STORE_CONTROL
        )

    async def init_consumer(
        self, session_maker: async_sessionmaker[AsyncSession]
    ) -> None:
        """Start consuming store_status"""
        settings = self.settings

        if self.subscriber is None:
            self.subscriber = KafkaEventSubscriber(
                bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
                group_id=settings.KAFKA_GROUP_ID,
                client_id=f"{settings.SERVICE_NAME}-consumer",
                service_name="shop_service",
                log_level=settings.LOG_LEVEL,
                max_retries=settings.KAFKA_CONNECT_RETRIES,
                retry_delay=settings.KAFKA_RETRY_DELAY,
                redelivery_delay=settings.KAFKA_REDELIVERY_DELAY,
            )

        self.event_consumer = ShopEventConsumer(
            self.subscriber, session_maker, topic=settings.KAFKA_TOPIC_STORE_STATUS
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
