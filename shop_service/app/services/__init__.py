"""Service layer for Shop Service"""

from .product_service import ProductService
from .results import BadRequest, Created, Deleted, Found, NotFound, ProductResult

__all__ = [
    "ProductService",
    "ProductResult",
    "Created",
    "Found",
    "Deleted",
    "NotFound",
    "BadRequest",
]
