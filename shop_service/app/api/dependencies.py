"""
FastAPI dependency injection for Shop Service

Everything is taken from ``app.state``, populated by the application
factory and its lifespan.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.event_management import ShopEventManager
from ..events.event_producers import ShopEventProducer
from ..services.product_service import ProductService


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""
    async for session in request.app.state.database_manager.get_async_session():
        yield session


def get_product_event_producer(request: Request) -> Optional[ShopEventProducer]:
    event_manager: ShopEventManager = request.app.state.event_manager
    return event_manager.event_producer


def get_product_service(
    session: AsyncSession = Depends(get_async_session),
    event_producer: Optional[ShopEventProducer] = Depends(get_product_event_producer),
) -> ProductService:
    """Provide ProductService instance with database and event publishing"""
    return ProductService(session, event_producer)


def get_correlation_id(request: Request) -> Optional[str]:
    """Extract correlation ID from request headers"""
    return (
        request.headers.get("X-Correlation-ID")
        or request.headers.get("correlation-id")
        or request.headers.get("x-request-id")
    )


CorrelationIdDep = Depends(get_correlation_id)
ProductServiceDep = Depends(get_product_service)
