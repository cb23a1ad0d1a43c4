"""Repository layer for Warehouse Service"""

from .inventory_repository import InventoryRepository

__all__ = ["InventoryRepository"]
