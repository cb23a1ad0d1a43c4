from sqlalchemy.orm import DeclarativeBase


class ShopServiceBase(DeclarativeBase):
    """Base class for all Shop Service database models."""

    pass
