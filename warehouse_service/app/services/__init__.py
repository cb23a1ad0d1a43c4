"""Service layer for Warehouse Service"""

from .inventory_service import InventoryService

__all__ = ["InventoryService"]
