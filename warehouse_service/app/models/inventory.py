from sqlalchemy import BigInteger, CheckConstraint, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import WarehouseServiceBase


class InventoryEntry(WarehouseServiceBase):
    # Same table name as the shop, different schema and owner
    __tablename__ = "products"

    # Ids come from the shop, never generated here
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="inventory_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<InventoryEntry id={self.id} quantity={self.quantity}>"
