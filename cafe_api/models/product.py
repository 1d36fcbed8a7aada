from enum import Enum
from tortoise import fields, models
import uuid


class StockMode(str, Enum):
    AUTO = "auto"  # Inferred from stock_quantity and recipe
    PREMADE = "premade"  # Served from finished-goods stock only
    RECIPE = "recipe"  # Made to order from recipe ingredients
    UNTRACKED = "untracked"  # No stock tracking at all


def default_sizes():
    return ["S", "M", "L"]


def default_moods():
    return ["Hot", "Ice"]


def default_sugar_levels():
    return [30, 50, 70]


class Product(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    price = fields.DecimalField(max_digits=10, decimal_places=2)
    stock_quantity = fields.IntField(default=0)  # Pre-made units ready to serve
    low_stock_threshold = fields.IntField(default=5)
    category = fields.CharField(max_length=128, null=True)
    is_available = fields.BooleanField(default=True)  # Manual override
    image_url = fields.CharField(max_length=512, null=True)

    # Display-only customization axes
    has_sizes = fields.BooleanField(default=False)
    sizes = fields.JSONField(default=default_sizes)
    has_moods = fields.BooleanField(default=False)
    moods = fields.JSONField(default=default_moods)
    has_sugar_levels = fields.BooleanField(default=False)
    sugar_levels = fields.JSONField(default=default_sugar_levels)

    # Embedded recipe: [{"inventory_item_id", "quantity_required", "unit"}]
    recipe = fields.JSONField(default=list)
    stock_mode = fields.CharEnumField(StockMode, default=StockMode.AUTO)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "products"
        indexes = [
            ("is_available",),
            ("category",),
        ]
