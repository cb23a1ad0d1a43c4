"""
Pytest configuration and fixtures for Warehouse Service tests.
"""

from typing import Any, AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from product_sync.core.database import DatabaseManager
from warehouse_service.app.core.setting import WarehouseSettings
from warehouse_service.app.events.event_producers import WarehouseEventProducer
from warehouse_service.app.main import create_app
from warehouse_service.app.models.base import WarehouseServiceBase

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def warehouse_settings() -> WarehouseSettings:
    return WarehouseSettings(
        _env_file=None,
        ENVIRONMENT="test",
        WAREHOUSE_DATABASE_URL=TEST_DATABASE_URL,
        ENABLE_EVENT_CONSUMER=False,
    )


@pytest.fixture
async def database_manager() -> AsyncGenerator[DatabaseManager, None]:
    """Fresh in-memory database with the warehouse schema."""
    manager = DatabaseManager(
        database_url=TEST_DATABASE_URL,
        metadata=WarehouseServiceBase.metadata,
        service_name="warehouse_service",
    )
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(database_manager) -> AsyncGenerator[Any, None]:
    async with database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def event_producer(recording_publisher) -> WarehouseEventProducer:
    return WarehouseEventProducer(recording_publisher)


@pytest.fixture
async def warehouse_app(
    warehouse_settings, recording_publisher
) -> AsyncGenerator[FastAPI, None]:
    """Warehouse application with its lifespan running."""
    app = create_app(warehouse_settings, event_publisher=recording_publisher)
    async with app.router.lifespan_context(app):
        yield app


@pytest.fixture
async def client(warehouse_app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=warehouse_app)
    async with AsyncClient(transport=transport, base_url="http://warehouse") as client:
        yield client
