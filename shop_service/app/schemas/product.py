from datetime import date
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from product_sync.events import INT32_MAX

from ..models.product import ProductType


class ProductWrite(BaseModel):
    """Writable product fields, as sent by clients on POST and PUT"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        ..., min_length=1, description="Product name (required, non-empty)"
    )
    product_type: ProductType = Field(
        ...,
        validation_alias=AliasChoices("productTypeDTO", "productType", "product_type"),
        serialization_alias="productTypeDTO",
    )
    expiration_date: date = Field(
        ...,
        validation_alias=AliasChoices("expirationDate", "expiration_date"),
        serialization_alias="expirationDate",
        description="ISO-8601 calendar date",
    )
    quantity: Optional[int] = Field(
        None, ge=0, le=INT32_MAX, description="Initial quantity, null means 0"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be empty or whitespace only")
        return v

    @field_validator("expiration_date", mode="before")
    @classmethod
    def validate_expiration_date(cls, v: Any) -> Any:
        if isinstance(v, date):
            return v
        if not isinstance(v, str):
            raise ValueError("expirationDate must be an ISO-8601 date string")
        try:
            return date.fromisoformat(v)
        except ValueError:
            raise ValueError(f"expirationDate '{v}' is not an ISO-8601 date") from None

    @property
    def effective_quantity(self) -> int:
        return self.quantity or 0


class ProductRead(BaseModel):
    """Product as returned by the HTTP surface"""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    product_type: ProductType = Field(..., alias="productTypeDTO")
    expiration_date: date = Field(..., alias="expirationDate")
    quantity: int

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
