from .base import WarehouseServiceBase
from .inventory import InventoryEntry

"""Warehouse Service Models"""

__all__ = ["WarehouseServiceBase", "InventoryEntry"]
