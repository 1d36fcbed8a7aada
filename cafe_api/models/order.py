from enum import Enum
from tortoise import fields, models
import uuid


class OrderStatus(str, Enum):
    NEW = "New"  # Initial state after a successful placement
    PREPARING = "Preparing"
    READY = "Ready"
    COMPLETED = "Completed"
    SERVED = "Served"
    PENDING = "Pending"  # Legacy initial state
    CANCELLED = "Cancelled"


# Terminal "done" states counted as completed for revenue accounting
COMPLETED_STATUSES = {OrderStatus.COMPLETED, OrderStatus.SERVED}
STATUS_VALUES = {status.value for status in OrderStatus}


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order_number = fields.CharField(max_length=32, unique=True)
    customer_id = fields.CharField(max_length=64)
    customer_email = fields.CharField(max_length=255)
    customer_name = fields.CharField(max_length=255)
    subtotal = fields.DecimalField(max_digits=14, decimal_places=2, default=0)
    delivery_address = fields.TextField(null=True)
    delivery_fee = fields.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_amount = fields.DecimalField(max_digits=14, decimal_places=2, default=0)
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.NEW)
    is_completed = fields.BooleanField(default=False)
    payment_method = fields.CharField(max_length=32, default="cash")
    table_number = fields.CharField(max_length=16, null=True)
    placed_by_staff = fields.BooleanField(default=False)
    staff_id = fields.CharField(max_length=64, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("status",),                 # Status-based filtering
            ("customer_id",),            # Customer order history
            ("created_at",),             # Time-based queries
            ("status", "created_at"),    # Composite: status with time
        ]


class OrderItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order = fields.ForeignKeyField("models.Order", related_name="items")
    product_id = fields.UUIDField()  # Plain reference: lines survive catalog deletes
    name = fields.CharField(max_length=255)  # Snapshot at order time
    price = fields.DecimalField(max_digits=10, decimal_places=2)  # Snapshot at order time
    quantity = fields.IntField()
    line_total = fields.DecimalField(max_digits=14, decimal_places=2)
    size = fields.CharField(max_length=32, null=True)
    mood = fields.CharField(max_length=32, null=True)
    sugar = fields.CharField(max_length=32, null=True)

    class Meta:
        table = "order_items"
        indexes = [
            ("order_id",),
            ("product_id",),  # Product popularity
        ]
