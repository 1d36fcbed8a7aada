import logging
from fastapi import APIRouter, Depends, Query, status
from cafe_api.core.auth import get_current_user, get_optional_user, require
from cafe_api.core.config import LOG_LEVEL
from cafe_api.core.errors import OrderNotFound, PermissionDenied
from cafe_api.models.user import Role, User
from cafe_api.schemas.response import SuccessResponse
from cafe_api.services.order_service import (
    place_order,
    get_order_by_id,
    update_order_status,
    list_orders_for_staff,
    list_orders_for_customer,
)
from cafe_api.schemas.order import OrderRequest, OrderStatusUpdate, OrderStatusResponse, build_order_response
from typing import Optional
from uuid import UUID

router = APIRouter()
logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("uvicorn")


def _order_data(order):
    return build_order_response(order, order.items).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderRequest, user: Optional[User] = Depends(get_optional_user)):
    """
    Places a new order. Stock is deducted synchronously, so a 201 means the
    order is saved and its stock already committed.
    """
    order = await place_order(request_data, user)
    log.info(f"Order {order.order_number} accepted ({len(request_data.items)} line(s)).")
    return SuccessResponse(data=_order_data(order))


@router.get("/staff", response_model=SuccessResponse)
async def list_staff_orders_endpoint(
    limit: int = Query(100, ge=1, le=500),
    status_filter: Optional[str] = Query(None, alias="status", description="Comma-separated, e.g. New,Preparing"),
    user: User = Depends(require("orders:manage")),
):
    """Order queue for the counter, newest first."""
    orders = await list_orders_for_staff(limit=limit, statuses=status_filter)
    return SuccessResponse(data=[_order_data(order) for order in orders])


@router.get("/customer", response_model=SuccessResponse)
async def list_customer_orders_endpoint(
    limit: int = Query(100, ge=1, le=500),
    status_filter: Optional[str] = Query(None, alias="status"),
    user: User = Depends(require("orders:own")),
):
    orders = await list_orders_for_customer(str(user.id), limit=limit, status=status_filter)
    return SuccessResponse(data=[_order_data(order) for order in orders])


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: UUID, user: User = Depends(get_current_user)):
    """Fetches details for a specific order. Customers only see their own."""
    order = await get_order_by_id(order_id)
    if not order:
        raise OrderNotFound(order_id)
    if Role(user.role) == Role.CUSTOMER and order.customer_id != str(user.id):
        raise PermissionDenied("You can only view your own orders.")
    return SuccessResponse(data=_order_data(order))


@router.patch("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(
    order_id: UUID,
    payload: OrderStatusUpdate,
    user: User = Depends(require("orders:manage")),
):
    """
    Updates status (e.g. 'Preparing', 'Ready', 'Served').
    """
    order = await update_order_status(order_id, payload.status)
    data = OrderStatusResponse(
        order_id=order.id,
        order_number=order.order_number,
        status=order.status,
        is_completed=order.is_completed,
        message=f"Order status successfully updated to {order.status.value}",
    ).model_dump(mode="json")
    return SuccessResponse(data=data)
