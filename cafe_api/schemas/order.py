import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from cafe_api.models.order import OrderStatus


class CartLineRequest(BaseModel):
    """Schema for a single line in the cart submission."""
    product_id: uuid.UUID
    name: Optional[str] = None  # Client-side display name, ignored in favour of the catalog snapshot
    price: Optional[Decimal] = Field(None, ge=0)  # Client-asserted unit price
    quantity: int = Field(..., ge=1)
    size: Optional[str] = None
    mood: Optional[str] = None
    sugar: Optional[str] = None


class OrderRequest(BaseModel):
    """Schema for the full order placement request body."""
    customer_id: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    items: List[CartLineRequest]
    total_amount: Decimal = Field(..., ge=0, description="Claimed total including any delivery fee.")
    delivery_address: Optional[str] = None
    payment_method: str = "cash"
    table_number: Optional[str] = None
    placed_by_staff: bool = False
    staff_id: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    """Schema for updating an order status. Validated against the vocabulary in the service."""
    status: str = Field(..., min_length=1)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: uuid.UUID
    name: str
    price: Decimal
    quantity: int
    line_total: Decimal
    size: Optional[str] = None
    mood: Optional[str] = None
    sugar: Optional[str] = None


class OrderDetailResponse(BaseModel):
    """Schema for a persisted order with its snapshotted lines."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    customer_id: str
    customer_email: str
    customer_name: str
    items: List[OrderItemResponse] = []
    subtotal: Decimal
    delivery_address: Optional[str] = None
    delivery_fee: Decimal
    total_amount: Decimal
    status: OrderStatus
    is_completed: bool
    payment_method: str
    table_number: Optional[str] = None
    placed_by_staff: bool
    staff_id: Optional[str] = None
    created_at: datetime


class OrderStatusResponse(BaseModel):
    order_id: uuid.UUID
    order_number: str
    status: OrderStatus
    is_completed: bool
    message: str


def build_order_response(order, items) -> OrderDetailResponse:
    """Builds the detail schema from an Order and its already-fetched lines."""
    return OrderDetailResponse(
        id=order.id,
        order_number=order.order_number,
        customer_id=order.customer_id,
        customer_email=order.customer_email,
        customer_name=order.customer_name,
        items=[OrderItemResponse.model_validate(item) for item in items],
        subtotal=order.subtotal,
        delivery_address=order.delivery_address,
        delivery_fee=order.delivery_fee,
        total_amount=order.total_amount,
        status=order.status,
        is_completed=order.is_completed,
        payment_method=order.payment_method,
        table_number=order.table_number,
        placed_by_staff=order.placed_by_staff,
        staff_id=order.staff_id,
        created_at=order.created_at,
    )
