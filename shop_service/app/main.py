"""
Shop Service FastAPI Application
================================

Composition root of the shop process: settings, database manager, event
manager (store_control producer, store_status consumer), error handling
and routers are assembled here and handed to handlers through ``app.state``.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from product_sync.core.database import DatabaseManager
from product_sync.events import EventPublisher, EventSubscriber
from product_sync.middleware import setup_error_handling
from product_sync.utils.logging import setup_logging

from .api.health import router as health_router
from .api.products import router as products_router
from .core.event_management import ShopEventManager
from .core.setting import ShopSettings, get_settings
from .models.base import ShopServiceBase


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown."""
    settings: ShopSettings = app.state.settings
    logger = app.state.logger
    startup_start = time.time()

    try:
        await app.state.database_manager.create_tables()
        await app.state.event_manager.init_events()
        if settings.ENABLE_EVENT_CONSUMER:
            await app.state.event_manager.init_consumer(
                app.state.database_manager.async_session_maker
            )
        else:
            logger.info("Skipping event consumer initialization (disabled)")
    except Exception as e:
        logger.error(
            "Failed to start shop service",
            exc_info=True,
            extra={
                "startup_duration_ms": int((time.time() - startup_start) * 1000),
                "error_type": type(e).__name__,
            },
        )
        raise

    logger.info(
        "Shop service started successfully",
        extra={
            "total_startup_duration_ms": int((time.time() - startup_start) * 1000),
            "environment": settings.ENVIRONMENT,
            "consumer_enabled": settings.ENABLE_EVENT_CONSUMER,
        },
    )

    yield

    logger.info("Starting shop service shutdown")
    await app.state.event_manager.close_events()
    await app.state.database_manager.close()
    logger.info("Shop service shutdown completed")


def create_app(
    settings: Optional[ShopSettings] = None,
    database_manager: Optional[DatabaseManager] = None,
    event_publisher: Optional[EventPublisher] = None,
    event_subscriber: Optional[EventSubscriber] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    logger = setup_logging(
        "shop_service",
        log_level=settings.LOG_LEVEL,
        enable_file_logging=settings.enable_file_logging,
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.state.settings = settings
    app.state.logger = logger
    app.state.database_manager = database_manager or DatabaseManager(
        database_url=settings.SHOP_DATABASE_URL,
        metadata=ShopServiceBase.metadata,
        service_name="shop_service",
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        log_level=settings.LOG_LEVEL,
    )
    app.state.event_manager = ShopEventManager(
        settings, publisher=event_publisher, subscriber=event_subscriber
    )

    setup_error_handling(app, "shop_service", log_level=settings.LOG_LEVEL)

    app.include_router(health_router, tags=["Health"])
    app.include_router(products_router, tags=["Product Management"])

    logger.info(
        "Configured FastAPI application",
        extra={"app_name": settings.APP_NAME, "app_version": settings.APP_VERSION},
    )
    return app
