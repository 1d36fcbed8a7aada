import logging
from fastapi import APIRouter, Depends, status
from cafe_api.core.auth import require
from cafe_api.core.config import LOG_LEVEL
from cafe_api.core.errors import NotFoundError
from cafe_api.models.inventory import DeliveryZone, InventoryItem
from cafe_api.models.user import User
from cafe_api.schemas.inventory import (
    DeliveryZoneRequest,
    DeliveryZoneResponse,
    InventoryItemRequest,
    InventoryResponse,
    LowStockAlertRequest,
)
from cafe_api.schemas.response import SuccessResponse
from cafe_api.services.inventory_service import is_inventory_low, list_low_stock_items, send_low_stock_alert
from uuid import UUID

log = logging.getLogger("uvicorn")
logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

router = APIRouter()


def _item_data(item: InventoryItem):
    response = InventoryResponse.model_validate(item)
    response.is_low_stock = is_inventory_low(item)
    return response.model_dump(mode="json")


async def _get_item(item_id: UUID) -> InventoryItem:
    item = await InventoryItem.get_or_none(id=item_id)
    if not item:
        raise NotFoundError(f"Inventory item {item_id} not found.")
    return item


@router.get("", response_model=SuccessResponse)
async def list_inventory(user: User = Depends(require("inventory:read"))):
    items = await InventoryItem.all().order_by("name")
    return SuccessResponse(data=[_item_data(item) for item in items])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_inventory_item(item_data: InventoryItemRequest, user: User = Depends(require("inventory:manage"))):
    """Adds a new ingredient with its opening stock."""
    item = await InventoryItem.create(**item_data.model_dump())
    log.info(f"Inventory item '{item.name}' added with {item.current_stock:g} {item.unit}.")
    return SuccessResponse(data=_item_data(item))


@router.get("/low-stock", response_model=SuccessResponse)
async def get_low_stock(user: User = Depends(require("inventory:read"))):
    items = await list_low_stock_items()
    return SuccessResponse(data=[_item_data(item) for item in items])


@router.post("/alert", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def raise_low_stock_alert(payload: LowStockAlertRequest, user: User = Depends(require("inventory:alert"))):
    """Lets staff flag an item for restocking; the alert goes to admins."""
    await send_low_stock_alert(payload.item_name)
    return SuccessResponse(data={"message": f"Low stock alert sent for '{payload.item_name}'."})


@router.get("/delivery-zones", response_model=SuccessResponse)
async def list_delivery_zones(user: User = Depends(require("inventory:read"))):
    zones = await DeliveryZone.all().order_by("city_or_area")
    return SuccessResponse(data=[DeliveryZoneResponse.model_validate(z).model_dump(mode="json") for z in zones])


@router.post("/delivery-zones", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_delivery_zone(payload: DeliveryZoneRequest, user: User = Depends(require("inventory:manage"))):
    zone = await DeliveryZone.create(**payload.model_dump())
    log.info(f"Delivery zone '{zone.city_or_area}' added (fee {zone.fee}).")
    return SuccessResponse(data=DeliveryZoneResponse.model_validate(zone).model_dump(mode="json"))


@router.get("/{item_id}", response_model=SuccessResponse)
async def get_inventory_item(item_id: UUID, user: User = Depends(require("inventory:read"))):
    """Fetches the stock for a specific ingredient."""
    return SuccessResponse(data=_item_data(await _get_item(item_id)))


@router.put("/{item_id}", response_model=SuccessResponse)
async def update_inventory_item(
    item_id: UUID,
    item_data: InventoryItemRequest,
    user: User = Depends(require("inventory:manage")),
):
    """Manual stock edit (deliveries, counts, corrections)."""
    item = await _get_item(item_id)
    item.update_from_dict(item_data.model_dump())
    await item.save()
    log.info(f"Inventory item '{item.name}' updated by {user.username}: {item.current_stock:g} {item.unit}.")
    return SuccessResponse(data=_item_data(item))


@router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_inventory_item(item_id: UUID, user: User = Depends(require("inventory:manage"))):
    item = await _get_item(item_id)
    await item.delete()
    return SuccessResponse(data={"message": f"Inventory item '{item.name}' deleted.", "item_id": str(item_id)})
