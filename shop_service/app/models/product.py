import enum
from datetime import date

from sqlalchemy import BigInteger, Date, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ShopServiceBase


class ProductType(str, enum.Enum):
    FRUITS = "FRUITS"
    VEGETABLES = "VEGETABLES"
    DAIRY = "DAIRY"
    MEAT = "MEAT"
    OTHER = "OTHER"


class Product(ShopServiceBase):
    __tablename__ = "products"
    # Never hand out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_type: Mapped[ProductType] = mapped_column(
        Enum(ProductType, native_enum=False, length=32, name="product_type"),
        nullable=False,
    )
    expiration_date: Mapped[date] = mapped_column(Date, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} quantity={self.quantity}>"
