from .base import ShopServiceBase
from .product import Product, ProductType

"""Shop Service Models"""

__all__ = [
    "ShopServiceBase",
    "Product",
    "ProductType",
]
