"""
Pytest configuration and fixtures for Shop Service tests.
"""

from typing import Any, AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from product_sync.core.database import DatabaseManager
from shop_service.app.core.setting import ShopSettings
from shop_service.app.events.event_producers import ShopEventProducer
from shop_service.app.main import create_app
from shop_service.app.models.base import ShopServiceBase

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def shop_settings() -> ShopSettings:
    """Settings isolated from any local .env file."""
    return ShopSettings(
        _env_file=None,
        ENVIRONMENT="test",
        SHOP_DATABASE_URL=TEST_DATABASE_URL,
        ENABLE_EVENT_CONSUMER=False,
    )


@pytest.fixture
async def database_manager() -> AsyncGenerator[DatabaseManager, None]:
    """Fresh in-memory database with the shop schema."""
    manager = DatabaseManager(
        database_url=TEST_DATABASE_URL,
        metadata=ShopServiceBase.metadata,
        service_name="shop_service",
    )
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(database_manager) -> AsyncGenerator[Any, None]:
    """Create a test database session."""
    async with database_manager.async_session_maker() as session:
        yield session


@pytest.fixture
def event_producer(recording_publisher) -> ShopEventProducer:
    return ShopEventProducer(recording_publisher)


@pytest.fixture
async def shop_app(shop_settings, recording_publisher) -> AsyncGenerator[FastAPI, None]:
    """Shop application with its lifespan running."""
    app = create_app(shop_settings, event_publisher=recording_publisher)
    async with app.router.lifespan_context(app):
        yield app


@pytest.fixture
async def client(shop_app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the shop application."""
    transport = ASGITransport(app=shop_app)
    async with AsyncClient(transport=transport, base_url="http://shop") as client:
        yield client


@pytest.fixture
def sample_product_data():
    """Request body used across the product tests."""
    return {
        "name": "Test Product",
        "productTypeDTO": "OTHER",
        "expirationDate": "2002-02-18",
        "quantity": 5,
    }
