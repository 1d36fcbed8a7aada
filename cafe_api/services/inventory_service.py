import logging
from typing import Any, Iterable, List
from uuid import UUID

from cafe_api.models.inventory import InventoryItem
from cafe_api.models.product import Product
from cafe_api.services.notification_service import create_notification

log = logging.getLogger("inventory_service")


def is_inventory_low(item: InventoryItem) -> bool:
    return item.current_stock <= item.reorder_level


def is_product_low(product: Product) -> bool:
    return bool(product.is_available) and product.stock_quantity <= product.low_stock_threshold


# Low stock is a derived signal, recomputed on every read and never stored.

async def list_low_stock_items() -> List[InventoryItem]:
    items = await InventoryItem.all().order_by("name")
    return [item for item in items if is_inventory_low(item)]


async def count_low_stock_items() -> int:
    return len(await list_low_stock_items())


async def count_low_stock_products() -> int:
    products = await Product.filter(is_available=True)
    return sum(1 for product in products if is_product_low(product))


async def check_for_low_stock(item_ids: Iterable[UUID], order_id: Any = None, conn: Any = None) -> List[InventoryItem]:
    """Re-reads the given ingredients and emits a staff warning for each one now at or below its reorder level."""
    low_items = []
    for item_id in dict.fromkeys(item_ids):
        item = await InventoryItem.get_or_none(id=item_id)
        if not item or not is_inventory_low(item):
            continue
        log.warning(f"ALERT: Low stock detected for '{item.name}'! Qty: {item.current_stock} {item.unit}")
        await create_notification(
            message=f"Inventory item '{item.name}' is running low ({item.current_stock:g} {item.unit} left).",
            type="warning",
            category="inventory",
            target_role="staff",
            related_id=item.id,
            conn=conn,
        )
        low_items.append(item)
    return low_items


async def send_low_stock_alert(item_name: str):
    """Staff-triggered low stock alert for an item, tracked or not."""
    item = await InventoryItem.filter(name=item_name).first()
    return await create_notification(
        message=f"Low stock alert: '{item_name}' needs restocking.",
        type="warning",
        category="inventory",
        target_role="admin",
        related_id=item.id if item else None,
    )
