import asyncio
from typing import Dict, List, Optional, Set

from aiokafka import AIOKafkaConsumer, AIOKafkaProducer, TopicPartition  # type: ignore
from aiokafka.admin import AIOKafkaAdminClient, NewTopic  # type: ignore
from aiokafka.errors import KafkaConnectionError, KafkaError  # type: ignore
from pydantic import ValidationError

from ..utils.logging import setup_logging
from .base import EventHandler, EventPublisher, EventPublishError, EventSubscriber
from .product_message import ProductMessage


class KafkaEventPublisher(EventPublisher):
    """
    Kafka publisher with connection retry logic.

    Every message is keyed by product id. With graceful degradation enabled
    a failed publish is logged instead of raised.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        client_id: str,
        service_name: str = "product_sync",
        log_level: str = "INFO",
        max_retries: int = 20,
        retry_delay: float = 2.0,
        topic_partitions: int = 1,
        enable_graceful_degradation: bool = True,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.topic_partitions = topic_partitions
        self.enable_graceful_degradation = enable_graceful_degradation
        self.producer: Optional[AIOKafkaProducer] = None
        self.is_connected = False
        self._known_topics: Set[str] = set()
        self._connection_lock = asyncio.Lock()
        self.logger = setup_logging(f"{service_name}.events.kafka", log_level=log_level)

    async def ensure_topic_exists(self, topic_name: str) -> None:
        """Ensure a Kafka topic exists, creating it if necessary."""
        if topic_name in self._known_topics:
            return

        admin_client = AIOKafkaAdminClient(bootstrap_servers=self.bootstrap_servers)
        try:
            await admin_client.start()  # type: ignore
            topics = await admin_client.list_topics()
            if topic_name not in topics:
                await admin_client.create_topics(
                    [
                        NewTopic(
                            name=topic_name,
                            num_partitions=self.topic_partitions,
                            replication_factor=1,
                        )
                    ]
                )
                self.logger.info(
                    "Created Kafka topic",
                    extra={
                        "topic_name": topic_name,
                        "partitions": self.topic_partitions,
                        "operation": "create_topic",
                    },
                )
            self._known_topics.add(topic_name)
        except Exception as e:
            # Broker-side auto creation may still succeed
            self.logger.warning(
                "Error ensuring Kafka topic exists",
                extra={
                    "topic_name": topic_name,
                    "error": str(e),
                    "operation": "ensure_topic_exists",
                },
            )
        finally:
            await admin_client.close()  # type: ignore

    async def start(self, timeout: float = 30.0) -> None:
        """Start Kafka producer with retry logic"""
        async with self._connection_lock:
            if self.producer and self.is_connected:
                return

            self.producer = AIOKafkaProducer(
                bootstrap_servers=self.bootstrap_servers,
                client_id=self.client_id,
                acks="all",
                retry_backoff_ms=1000,
                request_timeout_ms=30000,
                connections_max_idle_ms=540000,
            )

            for attempt in range(self.max_retries):
                try:
                    self.logger.info(
                        "Attempting Kafka connection",
                        extra={
                            "attempt": attempt + 1,
                            "max_retries": self.max_retries,
                            "operation": "kafka_connect",
                        },
                    )

                    await asyncio.wait_for(self.producer.start(), timeout=timeout)  # type: ignore

                    self.is_connected = True
                    self.logger.info("Successfully connected to Kafka")
                    return

                except (KafkaConnectionError, asyncio.TimeoutError) as e:
                    delay = self.retry_delay * (2**attempt)
                    self.logger.warning(
                        f"Kafka connection attempt {attempt + 1} failed: {e}. "
                        f"Retrying in {delay} seconds..."
                    )

                    if attempt < self.max_retries - 1:
                        await asyncio.sleep(delay)

            self.logger.error(
                f"Failed to connect to Kafka after {self.max_retries} attempts. "
                f"Running in degraded mode (messages will not be published)"
            )
            self.is_connected = False

    async def stop(self) -> None:
        """Stop Kafka producer"""
        async with self._connection_lock:
            if self.producer:
                try:
                    await self.producer.stop()  # type: ignore
                    self.logger.info("Kafka producer stopped")
                except KafkaError as e:
                    self.logger.warning(
                        "Error stopping Kafka producer",
                        extra={"error": str(e), "operation": "stop_producer"},
                    )
                finally:
                    self.producer = None
                    self.is_connected = False

    async def publish(self, message: ProductMessage, topic: str) -> None:
        """Publish a product message keyed by its id"""
        if not self.is_connected or not self.producer:
            if self.enable_graceful_degradation:
                self.logger.warning(
                    "Kafka not available, logging message instead",
                    extra={
                        "topic": topic,
                        "product_id": message.id,
                        "quantity": message.quantity,
                        "operation": "publish_degraded",
                    },
                )
                return
            raise EventPublishError(topic, message, "Kafka producer not connected")

        try:
            await self.ensure_topic_exists(topic)
            await self.producer.send_and_wait(  # type: ignore
                topic=topic,
                value=message.to_bytes(),
                key=message.key,
            )
            self.logger.info(
                "Published message to Kafka topic",
                extra={
                    "topic": topic,
                    "product_id": message.id,
                    "quantity": message.quantity,
                    "operation": "publish_message",
                },
            )

        except KafkaError as e:
            if self.enable_graceful_degradation:
                self.logger.error(
                    f"Failed to publish message, logging instead: {e}",
                    extra={
                        "topic": topic,
                        "product_id": message.id,
                        "quantity": message.quantity,
                    },
                )
                return

            self.logger.error(
                "Failed to publish message to Kafka",
                extra={
                    "topic": topic,
                    "product_id": message.id,
                    "error": str(e),
                    "operation": "publish_message_failed",
                },
            )
            raise EventPublishError(topic, message, str(e)) from e

    async def health_check(self) -> bool:
        """Check if Kafka connection is healthy"""
        if not self.producer or not self.is_connected:
            return False

        try:
            metadata = await self.producer.client.fetch_all_metadata()  # type: ignore
            return len(metadata.brokers()) > 0  # type: ignore
        except KafkaError as e:
            self.logger.warning(
                "Kafka health check failed",
                extra={"error": str(e), "operation": "health_check"},
            )
            return False


class KafkaEventSubscriber(EventSubscriber):
    """
    Kafka subscriber with connection retry logic.

    One consumer per topic. Offsets are committed only after every handler
    for a message succeeded; a failing handler seeks the partition back so
    the same message is delivered again. Unparseable payloads are committed
    and dropped so they cannot stall the consumer group.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        group_id: str,
        client_id: str,
        service_name: str = "product_sync",
        log_level: str = "INFO",
        max_retries: int = 5,
        retry_delay: float = 2.0,
        redelivery_delay: float = 1.0,
        enable_graceful_degradation: bool = True,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.group_id = group_id
        self.client_id = client_id
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.redelivery_delay = redelivery_delay
        self.enable_graceful_degradation = enable_graceful_degradation
        self.consumers: Dict[str, AIOKafkaConsumer] = {}
        self.handlers: Dict[str, List[EventHandler]] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self.running = False
        self.is_connected = False
        self.logger = setup_logging(f"{service_name}.events.kafka", log_level=log_level)

    async def start(self, timeout: float = 30.0) -> None:
        """Start event subscriber with retry logic"""
        for attempt in range(self.max_retries):
            try:
                self.logger.info(
                    "Attempting Kafka subscriber connection",
                    extra={
                        "attempt": attempt + 1,
                        "max_retries": self.max_retries,
                        "operation": "subscriber_connect",
                    },
                )

                # Probe the broker with a throwaway consumer
                test_consumer = AIOKafkaConsumer(
                    bootstrap_servers=self.bootstrap_servers,
                    group_id=f"{self.group_id}-health-check",
                    client_id=f"{self.client_id}-health-check",
                )

                await asyncio.wait_for(test_consumer.start(), timeout=timeout)  # type: ignore
                await test_consumer.stop()  # type: ignore

                self.running = True
                self.is_connected = True
                self.logger.info("Kafka subscriber connected successfully")
                return

            except (KafkaConnectionError, asyncio.TimeoutError) as e:
                delay = self.retry_delay * (2**attempt)
                self.logger.warning(
                    f"Kafka subscriber connection attempt {attempt + 1} failed: {e}. "
                    f"Retrying in {delay} seconds..."
                )

                if attempt < self.max_retries - 1:
                    await asyncio.sleep(delay)

        self.running = False
        self.is_connected = False
        if self.enable_graceful_degradation:
            self.logger.error(
                "Failed to connect Kafka subscriber after all retries. "
                "Running in degraded mode (no message consumption)"
            )
            return

        self.logger.error("Failed to connect Kafka subscriber after all retries")
        raise KafkaConnectionError(
            f"Could not connect to Kafka at {self.bootstrap_servers}"
        )

    async def stop(self) -> None:
        """Stop all consumers"""
        self.running = False
        self.is_connected = False

        for task in self._tasks.values():
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        self._tasks.clear()

        for topic, consumer in self.consumers.items():
            try:
                await consumer.stop()  # type: ignore
                self.logger.info(
                    "Stopped Kafka consumer for topic",
                    extra={"topic": topic, "operation": "stop_consumer"},
                )
            except KafkaError as e:
                self.logger.warning(
                    "Error stopping Kafka consumer",
                    extra={
                        "topic": topic,
                        "error": str(e),
                        "operation": "stop_consumer_error",
                    },
                )

        self.consumers.clear()
        self.logger.info("All Kafka consumers stopped")

    async def subscribe(self, topic: str, handler: EventHandler) -> None:
        """Subscribe a handler to a topic"""
        if not self.is_connected:
            self.logger.warning(f"Cannot subscribe to {topic} - Kafka not connected")
            return

        self.handlers.setdefault(topic, []).append(handler)

        if topic in self.consumers:
            return

        try:
            consumer = AIOKafkaConsumer(
                topic,
                bootstrap_servers=self.bootstrap_servers,
                group_id=self.group_id,
                client_id=f"{self.client_id}-{topic}",
                enable_auto_commit=False,
                auto_offset_reset="earliest",
            )

            await consumer.start()  # type: ignore
            self.consumers[topic] = consumer
            self._tasks[topic] = asyncio.create_task(
                self._consume_messages(topic, consumer)
            )
            self.logger.info(
                "Subscribed to Kafka topic",
                extra={
                    "topic": topic,
                    "group_id": self.group_id,
                    "handler": type(handler).__name__,
                    "operation": "subscribe",
                },
            )

        except KafkaError as e:
            self.logger.error(
                "Failed to subscribe to Kafka topic",
                extra={
                    "topic": topic,
                    "error": str(e),
                    "operation": "subscribe_failed",
                },
            )
            if not self.enable_graceful_degradation:
                raise

    async def health_check(self) -> bool:
        """Connected, and no consumer task has died"""
        return self.is_connected and all(
            not task.done() for task in self._tasks.values()
        )

    async def _consume_messages(self, topic: str, consumer: AIOKafkaConsumer) -> None:
        """Consume messages from a specific topic in delivery order"""
        try:
            async for message in consumer:  # type: ignore
                if not self.running:
                    break
                try:
                    await self.process_message(consumer, message)
                except KafkaError as e:
                    # Uncommitted, so the group redelivers it
                    self.logger.error(
                        "Failed to commit or rewind message, continuing",
                        extra={
                            "topic": topic,
                            "partition": message.partition,
                            "offset": message.offset,
                            "error": str(e),
                            "operation": "commit_failed",
                        },
                    )

        except KafkaError as e:
            self.logger.error(
                "Kafka consumer error",
                extra={"topic": topic, "error": str(e), "operation": "consumer_error"},
                exc_info=True,
            )

    async def process_message(self, consumer: AIOKafkaConsumer, record) -> bool:
        """
        Decode ``record`` and run every handler for its topic.

        Returns True when the offset was committed after successful handling,
        False when the record was dropped as poison or scheduled for redelivery.
        """
        partition = TopicPartition(record.topic, record.partition)
        context = {
            "topic": record.topic,
            "partition": record.partition,
            "offset": record.offset,
        }

        try:
            if record.value is None:
                raise ValueError("empty payload")
            message = ProductMessage.from_bytes(record.value)
        except (ValidationError, ValueError) as e:
            self.logger.error(
                "Dropping unparseable message",
                extra={**context, "error": str(e), "operation": "poison_message"},
            )
            await consumer.commit({partition: record.offset + 1})  # type: ignore
            return False

        for handler in self.handlers.get(record.topic, []):
            try:
                await handler.handle(message)
            except Exception as e:
                self.logger.error(
                    "Message handler error, scheduling redelivery",
                    extra={
                        **context,
                        "product_id": message.id,
                        "handler": type(handler).__name__,
                        "error": str(e),
                        "operation": "handler_error",
                    },
                    exc_info=True,
                )
                consumer.seek(partition, record.offset)  # type: ignore
                await asyncio.sleep(self.redelivery_delay)
                return False

        await consumer.commit({partition: record.offset + 1})  # type: ignore
        return True
