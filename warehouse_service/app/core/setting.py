"""
Warehouse Service configuration
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from product_sync.events import PRODUCT_GROUP_ID, STORE_CONTROL_TOPIC, STORE_STATUS_TOPIC

WAREHOUSE_SERVICE_DIR = Path(__file__).parent.parent.parent
ENV_FILE = WAREHOUSE_SERVICE_DIR / ".env"


class WarehouseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Warehouse Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "warehouse-service"

    # HTTP (administrative surface)
    HOST: str = "0.0.0.0"
    PORT: int = 8081

    # Database
    WAREHOUSE_DATABASE_URL: str = "sqlite+aiosqlite:///./warehouse.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # Kafka
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_GROUP_ID: str = PRODUCT_GROUP_ID
    KAFKA_TOPIC_STORE_CONTROL: str = STORE_CONTROL_TOPIC
    KAFKA_TOPIC_STORE_STATUS: str = STORE_STATUS_TOPIC
    KAFKA_TOPIC_PARTITIONS: int = 1
    KAFKA_CONNECT_RETRIES: int = 20
    KAFKA_RETRY_DELAY: float = 2.0
    KAFKA_REDELIVERY_DELAY: float = 1.0
    ENABLE_EVENT_CONSUMER: bool = True

    # Seed a new entry with the quantity carried by the first store_control
    # message instead of 0
    SEED_QUANTITY_FROM_CONTROL: bool = False

    @property
    def enable_file_logging(self) -> bool:
        return self.ENVIRONMENT.lower() in ("production", "staging")


@lru_cache
def get_settings() -> WarehouseSettings:
    """Get settings singleton instance"""
    return WarehouseSettings()
