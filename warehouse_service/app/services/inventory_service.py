"""Inventory service for the warehouse projection"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from product_sync.utils.logging import setup_logging

from ..core.setting import get_settings
from ..events.event_producers import WarehouseEventProducer
from ..models.inventory import InventoryEntry
from ..repository.inventory_repository import InventoryRepository

logger = setup_logging(
    "warehouse_service.services.inventory", log_level=get_settings().LOG_LEVEL
)


class InventoryService:
    """Service class for inventory business logic"""

    def __init__(
        self,
        db: AsyncSession,
        event_producer: Optional[WarehouseEventProducer] = None,
    ):
        self.db = db
        self.repository = InventoryRepository(db)
        self.event_producer = event_producer

    async def check_quantity_and_send_status(
        self, product_id: int, seed_quantity: int = 0
    ) -> InventoryEntry:
        """
        Answer a store_control probe.

        Unknown ids are materialized with ``seed_quantity`` (0 unless seeding
        is configured) and committed before the reply is published. The
        reply always carries the stored quantity, never the probe's.
        """
        entry, created = await self.repository.get_or_materialize(
            product_id, initial_quantity=seed_quantity
        )
        if created:
            logger.info(
                "Materialized inventory entry for unknown product",
                extra={"product_id": product_id, "quantity": entry.quantity},
            )

        await self._send_status(entry)
        return entry

    async def get_entry(self, product_id: int) -> Optional[InventoryEntry]:
        return await self.repository.get_by_id(product_id)

    async def list_entries(self) -> List[InventoryEntry]:
        return await self.repository.list_all()

    async def set_quantity(
        self, product_id: int, quantity: int, correlation_id: Optional[str] = None
    ) -> Optional[InventoryEntry]:
        """
        Administrative stock change for a known id, pushed to the shop.

        Never creates an entry; only store_control probes do that.
        """
        entry = await self.repository.set_quantity(product_id, quantity)
        if entry is None:
            return None

        logger.info(
            "Inventory quantity set",
            extra={
                "product_id": product_id,
                "quantity": quantity,
                "correlation_id": correlation_id,
            },
        )
        await self._send_status(entry)
        return entry

    async def _send_status(self, entry: InventoryEntry) -> None:
        if self.event_producer is None:
            logger.warning(
                "No event producer configured, store_status not sent",
                extra={"product_id": entry.id},
            )
            return
        await self.event_producer.publish_stock_status(entry.id, entry.quantity)
