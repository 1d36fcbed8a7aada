# cafe_api/models/__init__.py
from .inventory import InventoryItem, DeliveryZone
from .product import Product, StockMode
from .order import Order, OrderItem, OrderStatus
from .notification import Notification
from .supplier import Supplier
from .user import User, Role
from .report import ReportLog

# Export all models
__all__ = [
    "InventoryItem",
    "DeliveryZone",
    "Product",
    "StockMode",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Notification",
    "Supplier",
    "User",
    "Role",
    "ReportLog",
]
