import uuid
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from cafe_api.models.product import StockMode


class RecipeLine(BaseModel):
    inventory_item_id: uuid.UUID
    quantity_required: float = Field(..., gt=0, description="Quantity consumed per unit sold.")
    unit: str = "pcs"


class ProductRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Name of the menu item (e.g., Iced Latte).")
    price: Decimal = Field(..., ge=0, description="Selling price of the item.")
    stock_quantity: int = Field(0, ge=0, description="Pre-made units ready to serve.")
    low_stock_threshold: int = Field(5, ge=0)
    category: Optional[str] = None
    is_available: bool = True
    image_url: Optional[str] = None
    has_sizes: bool = False
    sizes: List[str] = ["S", "M", "L"]
    has_moods: bool = False
    moods: List[str] = ["Hot", "Ice"]
    has_sugar_levels: bool = False
    sugar_levels: List[int] = [30, 50, 70]
    recipe: List[RecipeLine] = []
    stock_mode: StockMode = StockMode.AUTO


class RecipeLineResponse(BaseModel):
    inventory_item_id: str
    name: str
    quantity_required: float
    unit: str


class ProductResponse(BaseModel):
    id: uuid.UUID
    name: str
    price: Decimal
    stock_quantity: int
    low_stock_threshold: int
    category: Optional[str] = None
    is_available: bool
    is_low_stock: bool
    image_url: Optional[str] = None
    has_sizes: bool
    sizes: List[str]
    has_moods: bool
    moods: List[str]
    has_sugar_levels: bool
    sugar_levels: List[int]
    stock_mode: StockMode
    recipe: List[RecipeLineResponse]
