from pydantic import BaseModel, ConfigDict, Field

from product_sync.events import INT32_MAX


class InventoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quantity: int


class QuantityUpdate(BaseModel):
    quantity: int = Field(..., ge=0, le=INT32_MAX, description="New stock level")
