from .product import ProductRead, ProductWrite

__all__ = ["ProductRead", "ProductWrite"]
