"""Product service for catalog business logic"""

from typing import Optional

from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from product_sync.events import EventPublishError
from product_sync.utils.logging import setup_logging

from ..core.setting import get_settings
from ..events.event_producers import ShopEventProducer
from ..models.product import Product
from ..repository.product_repository import ProductRepository
from ..schemas.product import ProductRead, ProductWrite
from .results import BadRequest, Created, Deleted, Found, NotFound, ProductResult

logger = setup_logging("shop_service.services.products", log_level=get_settings().LOG_LEVEL)


class ProductService:
    """Service class for product business logic"""

    def __init__(
        self, db: AsyncSession, event_producer: Optional[ShopEventProducer] = None
    ):
        self.db = db
        self.repository = ProductRepository(db)
        self.event_producer = event_producer

    @staticmethod
    def _to_read(product: Product) -> ProductRead:
        return ProductRead(
            id=product.id,
            name=product.name,
            product_type=product.product_type,
            expiration_date=product.expiration_date,
            quantity=product.quantity,
        )

    async def create_product(
        self, product_data: ProductWrite, correlation_id: Optional[str] = None
    ) -> ProductResult:
        """
        Persist a new product, then probe the warehouse for its quantity.

        The probe goes out only after the commit. A failed publish is logged
        and the product stays created; any later probe for the id repairs
        the warehouse side.
        """
        try:
            product = await self.repository.insert(product_data)
        except (IntegrityError, DataError) as e:
            logger.warning(
                "Product rejected by the store",
                extra={"correlation_id": correlation_id, "error": str(e.orig)},
            )
            return BadRequest([str(e.orig)])

        logger.info(
            "Product created successfully",
            extra={
                "product_id": product.id,
                "quantity": product.quantity,
                "correlation_id": correlation_id,
            },
        )

        if self.event_producer:
            try:
                await self.event_producer.publish_product_quantity(
                    product_id=product.id,
                    quantity=product.quantity,
                    correlation_id=correlation_id,
                )
            except EventPublishError as e:
                logger.error(
                    "Product created but store_control publish failed",
                    extra={
                        "product_id": product.id,
                        "topic": e.topic,
                        "error": e.reason,
                        "correlation_id": correlation_id,
                    },
                )
        else:
            logger.warning(
                "No event producer configured, warehouse not notified",
                extra={"product_id": product.id, "correlation_id": correlation_id},
            )

        return Created(self._to_read(product))

    async def get_product(
        self, product_id: int, correlation_id: Optional[str] = None
    ) -> ProductResult:
        """Get product by ID"""
        product = await self.repository.find_by_id(product_id)
        if not product:
            return NotFound(product_id)

        logger.debug(
            "Product retrieved",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        return Found(self._to_read(product))

    async def list_products(self) -> ProductResult:
        products = await self.repository.find_all()
        return Found([self._to_read(product) for product in products])

    async def update_product(
        self,
        product_id: int,
        product_data: ProductWrite,
        correlation_id: Optional[str] = None,
    ) -> ProductResult:
        """Replace the writable fields. Publishes nothing."""
        try:
            product = await self.repository.update(product_id, product_data)
        except (IntegrityError, DataError) as e:
            return BadRequest([str(e.orig)])

        if not product:
            return NotFound(product_id)

        logger.info(
            "Product updated successfully",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        return Found(self._to_read(product))

    async def delete_product(
        self, product_id: int, correlation_id: Optional[str] = None
    ) -> ProductResult:
        """Delete product. The warehouse projection is left untouched."""
        if not await self.repository.delete_by_id(product_id):
            return NotFound(product_id)

        logger.info(
            "Product deleted successfully",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        return Deleted(product_id)

    async def apply_quantity_update(self, product_id: int, quantity: int) -> bool:
        """
        Overwrite the quantity reported by the warehouse.

        Unknown ids mean the product was deleted here; the update is dropped.
        """
        applied = await self.repository.update_quantity(product_id, quantity)
        if applied:
            logger.info(
                "Product quantity updated from warehouse",
                extra={"product_id": product_id, "quantity": quantity},
            )
        else:
            logger.info(
                "Dropping quantity update for unknown product",
                extra={"product_id": product_id, "quantity": quantity},
            )
        return applied
