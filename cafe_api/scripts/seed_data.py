# scripts/seed_data.py
import asyncio
import os
from cafe_api.core.db import init_db, close_db
from cafe_api.core.security import hash_password
from cafe_api.models.inventory import InventoryItem, DeliveryZone
from cafe_api.models.product import Product, StockMode
from cafe_api.models.user import User, Role


async def seed_inventory():
    beans, _ = await InventoryItem.get_or_create(
        name="Espresso Beans", defaults={"category": "Coffee", "unit": "g", "current_stock": 2000, "reorder_level": 500}
    )
    milk, _ = await InventoryItem.get_or_create(
        name="Fresh Milk", defaults={"category": "Dairy", "unit": "ml", "current_stock": 5000, "reorder_level": 1000}
    )
    cups, _ = await InventoryItem.get_or_create(
        name="Paper Cups", defaults={"category": "Packaging", "unit": "pcs", "current_stock": 200, "reorder_level": 50}
    )
    print("Inventory:", beans.id, milk.id, cups.id)
    return beans, milk, cups


async def seed_menu(beans, milk, cups):
    latte, _ = await Product.get_or_create(
        name="Cafe Latte",
        defaults={
            "price": "120.00",
            "category": "Coffee",
            "stock_mode": StockMode.RECIPE,
            "has_sizes": True,
            "has_moods": True,
            "recipe": [
                {"inventory_item_id": str(beans.id), "quantity_required": 18, "unit": "g"},
                {"inventory_item_id": str(milk.id), "quantity_required": 200, "unit": "ml"},
                {"inventory_item_id": str(cups.id), "quantity_required": 1, "unit": "pcs"},
            ],
        },
    )
    americano, _ = await Product.get_or_create(
        name="Americano",
        defaults={
            "price": "95.00",
            "category": "Coffee",
            "stock_mode": StockMode.RECIPE,
            "recipe": [
                {"inventory_item_id": str(beans.id), "quantity_required": 18, "unit": "g"},
                {"inventory_item_id": str(cups.id), "quantity_required": 1, "unit": "pcs"},
            ],
        },
    )
    cookie, _ = await Product.get_or_create(
        name="Choco Chip Cookie",
        defaults={"price": "45.00", "category": "Pastry", "stock_quantity": 24, "stock_mode": StockMode.PREMADE},
    )
    water, _ = await Product.get_or_create(
        name="Bottled Water", defaults={"price": "25.00", "category": "Drinks", "stock_mode": StockMode.UNTRACKED}
    )
    print("Menu items:", str(latte.id), str(americano.id), str(cookie.id), str(water.id))


async def seed_zones():
    for area, fee in (("Makati", "50.00"), ("Taguig", "60.00"), ("Pasig", "70.00")):
        await DeliveryZone.get_or_create(city_or_area=area, defaults={"fee": fee})
    print("Delivery zones seeded.")


async def seed_admin():
    admin, created = await User.get_or_create(
        username=os.getenv("ADMIN_USERNAME", "admin"),
        defaults={
            "name": "Cafe Admin",
            "email": "admin@tambayan.cafe",
            "password_hash": hash_password(os.getenv("ADMIN_PASSWORD", "admin123")),
            "role": Role.ADMIN,
        },
    )
    print("Admin user:", admin.username, "(created)" if created else "(exists)")


async def main():
    await init_db()
    beans, milk, cups = await seed_inventory()
    await seed_menu(beans, milk, cups)
    await seed_zones()
    await seed_admin()
    await close_db()

if __name__ == "__main__":
    asyncio.run(main())
