"""Inventory repository for database operations"""

from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.inventory import InventoryEntry


class InventoryRepository:
    """Repository for the quantity projection"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, product_id: int) -> Optional[InventoryEntry]:
        query = select(InventoryEntry).where(InventoryEntry.id == product_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[InventoryEntry]:
        result = await self.db.execute(select(InventoryEntry).order_by(InventoryEntry.id))
        return list(result.scalars().all())

    async def get_or_materialize(
        self, product_id: int, initial_quantity: int = 0
    ) -> Tuple[InventoryEntry, bool]:
        """
        Return the entry for ``product_id``, creating it when absent.

        The second element tells whether this call created the entry. A
        concurrent materialization of the same id loses on the primary key
        and falls back to the row the winner committed.
        """
        entry = await self.get_by_id(product_id)
        if entry is not None:
            return entry, False

        entry = InventoryEntry(id=product_id, quantity=initial_quantity)
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await self.get_by_id(product_id)
            if existing is None:
                raise
            return existing, False
        return entry, True

    async def set_quantity(
        self, product_id: int, quantity: int
    ) -> Optional[InventoryEntry]:
        """Overwrite the quantity of an existing entry; None for unknown ids"""
        query = (
            select(InventoryEntry)
            .where(InventoryEntry.id == product_id)
            .with_for_update()
        )
        try:
            entry = (await self.db.execute(query)).scalar_one_or_none()
            if entry is None:
                await self.db.rollback()
                return None

            entry.quantity = quantity
            await self.db.commit()
            return entry
        except SQLAlchemyError:
            await self.db.rollback()
            raise
