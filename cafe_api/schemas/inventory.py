import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class InventoryItemRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Ingredient name (e.g., Espresso Beans).")
    category: Optional[str] = None
    unit: str = Field("pcs", description="Unit of measure, e.g. pcs, g, ml.")
    current_stock: float = Field(0, ge=0, description="Quantity on hand.")
    reorder_level: float = Field(10, ge=0, description="Stock level at or below which the item counts as low.")
    auto_reorder_enabled: bool = True


class InventoryResponse(BaseModel):
    """Schema for an inventory item with its derived low-stock flag."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    category: Optional[str] = None
    unit: str
    current_stock: float
    reorder_level: float
    auto_reorder_enabled: bool
    is_low_stock: bool = False
    updated_at: Optional[datetime] = None


class LowStockAlertRequest(BaseModel):
    item_name: str = Field(..., min_length=1)


class DeliveryZoneRequest(BaseModel):
    city_or_area: str = Field(..., min_length=1)
    fee: Decimal = Field(..., ge=0)
    is_active: bool = True


class DeliveryZoneResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    city_or_area: str
    fee: Decimal
    is_active: bool
