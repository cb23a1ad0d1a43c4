"""Product repository for database operations"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.product import Product
from ..schemas.product import ProductWrite


class ProductRepository:
    """Narrow gateway over the products table"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, product_data: ProductWrite) -> Product:
        """Insert a new product and commit; the store assigns the id"""
        product = Product(
            name=product_data.name,
            product_type=product_data.product_type,
            expiration_date=product_data.expiration_date,
            quantity=product_data.effective_quantity,
        )

        self.db.add(product)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        await self.db.refresh(product)
        return product

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        query = select(Product).where(Product.id == product_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_all(self) -> List[Product]:
        """All products in insertion order"""
        result = await self.db.execute(select(Product).order_by(Product.id))
        return list(result.scalars().all())

    async def update(
        self, product_id: int, product_data: ProductWrite
    ) -> Optional[Product]:
        """Replace every writable field of an existing product"""
        product = await self.find_by_id(product_id)
        if not product:
            return None

        product.name = product_data.name
        product.product_type = product_data.product_type
        product.expiration_date = product_data.expiration_date
        product.quantity = product_data.effective_quantity

        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        await self.db.refresh(product)
        return product

    async def delete_by_id(self, product_id: int) -> bool:
        """Hard delete; returns False when the id is unknown"""
        product = await self.find_by_id(product_id)
        if not product:
            return False

        await self.db.delete(product)
        await self.db.commit()
        return True

    async def update_quantity(self, product_id: int, quantity: int) -> bool:
        """
        Overwrite the quantity of one product inside a single transaction.

        The row is locked for the read-modify-write where the dialect
        supports ``SELECT ... FOR UPDATE``. Returns False for unknown ids.
        """
        query = select(Product).where(Product.id == product_id).with_for_update()
        try:
            product = (await self.db.execute(query)).scalar_one_or_none()
            if product is None:
                await self.db.rollback()
                return False

            product.quantity = quantity
            await self.db.commit()
            return True
        except SQLAlchemyError:
            await self.db.rollback()
            raise
