"""
Replication events shared by the shop and warehouse services.

    store_control  shop -> warehouse  "what is your quantity for id X"
    store_status   warehouse -> shop  "quantity for id X is N"
"""

from .base import EventHandler, EventPublisher, EventPublishError, EventSubscriber
from .product_message import (
    INT32_MAX,
    INT64_MAX,
    PRODUCT_GROUP_ID,
    STORE_CONTROL_TOPIC,
    STORE_STATUS_TOPIC,
    ProductMessage,
)

__all__ = [
    "EventHandler",
    "EventPublisher",
    "EventPublishError",
    "EventSubscriber",
    "ProductMessage",
    "INT32_MAX",
    "INT64_MAX",
    "PRODUCT_GROUP_ID",
    "STORE_CONTROL_TOPIC",
    "STORE_STATUS_TOPIC",
]
