from .inventory import InventoryRead, QuantityUpdate

__all__ = ["InventoryRead", "QuantityUpdate"]
