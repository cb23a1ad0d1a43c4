from sqlalchemy.orm import DeclarativeBase


class WarehouseServiceBase(DeclarativeBase):
    """Base class for all Warehouse Service database models."""

    pass
