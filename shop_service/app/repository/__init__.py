"""Repository layer for Shop Service"""

from .product_repository import ProductRepository

__all__ = ["ProductRepository"]
