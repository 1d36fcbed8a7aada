from tortoise import fields, models
import uuid

# Units that can only be consumed in whole pieces
DISCRETE_UNITS = {"pcs", "pc", "piece", "pieces", "unit", "units"}


class InventoryItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    category = fields.CharField(max_length=128, null=True)
    unit = fields.CharField(max_length=32, default="pcs")  # e.g. pcs, g, ml
    current_stock = fields.FloatField(default=0)
    reorder_level = fields.FloatField(default=10)  # For low stock alert and auto-reorder
    auto_reorder_enabled = fields.BooleanField(default=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "inventory_items"
        indexes = [
            ("name",),
        ]

    @property
    def is_discrete(self) -> bool:
        return (self.unit or "").strip().lower() in DISCRETE_UNITS


class DeliveryZone(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    city_or_area = fields.CharField(max_length=255)
    fee = fields.DecimalField(max_digits=10, decimal_places=2)
    is_active = fields.BooleanField(default=True)

    class Meta:
        table = "delivery_zones"
