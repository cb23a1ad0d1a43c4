"""
Product Message
===============

Wire contract exchanged on both replication topics.

``store_control`` carries shop -> warehouse probes, ``store_status`` carries
warehouse -> shop replies. Both carry the same two-field record and are
keyed by product id so every message for one product lands on one partition.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

STORE_CONTROL_TOPIC = "store_control"
STORE_STATUS_TOPIC = "store_status"
PRODUCT_GROUP_ID = "product_group"

INT32_MAX = 2**31 - 1
INT64_MAX = 2**63 - 1


class ProductMessage(BaseModel):
    """Quantity of a single product as known by the sender"""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., ge=1, le=INT64_MAX, description="Product id")
    quantity: int = Field(..., ge=0, le=INT32_MAX, description="Known quantity")

    @property
    def key(self) -> bytes:
        """Partition key for the bus"""
        return str(self.id).encode("utf-8")

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, payload: Union[bytes, str]) -> "ProductMessage":
        """Decode a bus payload; raises ``pydantic.ValidationError`` on garbage."""
        return cls.model_validate_json(payload)
