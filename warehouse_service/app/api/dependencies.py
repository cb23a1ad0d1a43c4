"""
FastAPI dependency injection for Warehouse Service
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..services.inventory_service import InventoryService


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async for session in request.app.state.database_manager.get_async_session():
        yield session


def get_inventory_service(
    request: Request, session: AsyncSession = Depends(get_async_session)
) -> InventoryService:
    """Provide InventoryService instance with database and event publishing"""
    return InventoryService(session, request.app.state.event_manager.event_producer)


def get_correlation_id(request: Request) -> Optional[str]:
    return request.headers.get("X-Correlation-ID") or request.headers.get(
        "x-request-id"
    )


CorrelationIdDep = Depends(get_correlation_id)
InventoryServiceDep = Depends(get_inventory_service)
