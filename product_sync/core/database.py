from typing import Any, AsyncGenerator, Dict

from sqlalchemy import MetaData, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ..utils.logging import setup_logging


def mask_database_url(database_url: str) -> str:
    """Hide credentials before a URL reaches the logs"""
    if "@" not in database_url:
        return database_url
    scheme, _, rest = database_url.partition("://")
    return f"{scheme}://***@{rest.split('@', 1)[1]}"


class DatabaseManager:
    """Async engine and session factory owned by one service."""

    def __init__(
        self,
        database_url: str,
        metadata: MetaData,
        service_name: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 20,
        log_level: str = "INFO",
    ) -> None:
        self.metadata = metadata
        self.service_name = service_name
        self.logger = setup_logging(f"{service_name}.database", log_level=log_level)

        self.logger.info(
            "Initializing database manager",
            extra={
                "operation": "database_manager_init",
                "database_url": mask_database_url(database_url),
                "echo": echo,
            },
        )

        engine_kwargs: Dict[str, Any] = {"echo": echo}

        if "sqlite" in database_url:
            engine_kwargs["connect_args"] = {
                "timeout": 60,
                "check_same_thread": False,
            }
            if ":memory:" in database_url or database_url.endswith("://"):
                # One shared connection, otherwise every session sees an empty db
                engine_kwargs["poolclass"] = StaticPool
            self.logger.info(
                "Configured SQLite database settings",
                extra={"database_type": "sqlite", "timeout": 60},
            )
        else:
            engine_kwargs.update(
                {
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                    "pool_timeout": 45,
                    "pool_recycle": 3600,
                    "pool_pre_ping": True,
                    "connect_args": {
                        "command_timeout": 30,
                        # Disable prepared statements to avoid shared_preload_libraries requirement
                        "prepared_statement_cache_size": 0,
                    },
                }
            )
            self.logger.info(
                "Configured PostgreSQL database settings",
                extra={
                    "database_type": "postgresql",
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                },
            )

        self.async_engine = create_async_engine(database_url, **engine_kwargs)
        self.async_session_maker = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        """Create all tables of this service."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(self.metadata.create_all, checkfirst=True)
        self.logger.info(
            "Database tables created",
            extra={"operation": "create_tables", "tables": sorted(self.metadata.tables)},
        )

    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session."""
        async with self.async_session_maker() as session:
            yield session

    async def health_check(self) -> bool:
        try:
            async with self.async_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            self.logger.warning(
                "Database health check failed",
                extra={"operation": "database_health_check", "error": str(e)},
            )
            return False

    async def close(self) -> None:
        """Close the engine and its connections."""
        await self.async_engine.dispose()
        self.logger.info(
            "Database connections closed",
            extra={"operation": "database_close"},
        )
