from decimal import Decimal

from cafe_api.models.inventory import InventoryItem
from cafe_api.models.product import Product, StockMode
from cafe_api.schemas.order import CartLineRequest, OrderRequest


async def make_item(name="Milk", unit="ml", current_stock=1000, reorder_level=10, auto_reorder_enabled=True):
    return await InventoryItem.create(
        name=name,
        unit=unit,
        current_stock=current_stock,
        reorder_level=reorder_level,
        auto_reorder_enabled=auto_reorder_enabled,
    )


async def make_product(name="Latte", price="100.00", stock_quantity=0, recipe=None,
                       stock_mode=StockMode.AUTO, is_available=True):
    return await Product.create(
        name=name,
        price=Decimal(price),
        stock_quantity=stock_quantity,
        recipe=recipe or [],
        stock_mode=stock_mode,
        is_available=is_available,
    )


def recipe_line(item, quantity_required, unit=None):
    return {"inventory_item_id": str(item.id), "quantity_required": quantity_required, "unit": unit or item.unit}


def order_request(lines, total, **kwargs):
    """lines: iterable of (product, quantity) pairs."""
    return OrderRequest(
        items=[CartLineRequest(product_id=product.id, name=product.name, price=product.price, quantity=qty)
               for product, qty in lines],
        total_amount=Decimal(str(total)),
        **kwargs,
    )
