import logging
from typing import List

from tortoise.expressions import F

from cafe_api.core.config import REORDER_AMOUNT
from cafe_api.models.inventory import InventoryItem
from cafe_api.services.inventory_service import is_inventory_low
from cafe_api.services.notification_service import create_notification

log = logging.getLogger("reorder_service")


async def check_and_reorder(amount: int = REORDER_AMOUNT) -> List[InventoryItem]:
    """
    Replenishes every auto-reorder item at or below its reorder level by `amount`.

    Returns the replenished items with their new stock.
    """
    candidates = await InventoryItem.filter(auto_reorder_enabled=True)
    replenished = []
    for item in candidates:
        if not is_inventory_low(item):
            continue
        updated = await InventoryItem.filter(id=item.id).update(current_stock=F("current_stock") + amount)
        if not updated:
            continue
        await item.refresh_from_db(fields=["current_stock"])
        log.info(
            f"Auto-reordered: {item.name} +{amount} {item.unit} "
            f"(ReorderLevel: {item.reorder_level:g}, New Stock: {item.current_stock:g})"
        )
        await create_notification(
            message=f"Auto-reordered {amount} {item.unit} of '{item.name}' (now {item.current_stock:g}).",
            type="info",
            category="inventory",
            target_role="admin",
            related_id=item.id,
        )
        replenished.append(item)
    return replenished
