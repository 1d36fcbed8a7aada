"""
Two-tier stock deduction for order fulfillment.

Pre-made stock (Product.stock_quantity) and recipe ingredients
(InventoryItem.current_stock) are each decremented with a single-row
conditional update: the row only changes when it still holds enough stock.
The match/no-match outcome of that update is the authoritative stock check.

Policy is strict pre-made with no fallback: a product served from pre-made
stock never draws its shortfall from the recipe, and pre-made units never
consume ingredients.

Each applied decrement is recorded in a StockLedger so the caller can revert
everything with compensating increments when a later step fails.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_CEILING
from typing import List, Optional, Type
from uuid import UUID

from tortoise.expressions import F
from tortoise.models import Model

from cafe_api.core.errors import InsufficientStock
from cafe_api.models.inventory import InventoryItem, DISCRETE_UNITS
from cafe_api.models.product import Product, StockMode

log = logging.getLogger("stock_service")


@dataclass(frozen=True)
class DeductionPlan:
    from_premade: int = 0
    from_recipe: int = 0

    @property
    def is_untracked(self) -> bool:
        return self.from_premade == 0 and self.from_recipe == 0


def resolve_stock_mode(product: Product, available_premade: Optional[int] = None) -> StockMode:
    """Turns StockMode.AUTO into a concrete mode from the product's fields."""
    mode = StockMode(product.stock_mode or StockMode.AUTO)
    if mode != StockMode.AUTO:
        return mode
    premade = product.stock_quantity if available_premade is None else available_premade
    if premade and premade > 0:
        return StockMode.PREMADE
    if product.recipe:
        return StockMode.RECIPE
    return StockMode.UNTRACKED


def plan_deduction(product: Product, quantity: int, available_premade: Optional[int] = None) -> DeductionPlan:
    """
    Decides where `quantity` sold units are taken from.

    The whole quantity comes from a single tier. Partial pre-made availability
    still plans the full quantity against pre-made stock, so the conditional
    decrement rejects it instead of silently switching to the recipe.
    """
    mode = resolve_stock_mode(product, available_premade)
    if mode == StockMode.PREMADE:
        return DeductionPlan(from_premade=quantity)
    if mode == StockMode.RECIPE:
        return DeductionPlan(from_recipe=quantity)
    return DeductionPlan()


def ingredient_amount(quantity_required, units: int, unit: Optional[str]) -> Decimal:
    """Total ingredient needed for `units` sold; whole pieces are rounded up."""
    needed = Decimal(str(quantity_required)) * units
    if (unit or "").strip().lower() in DISCRETE_UNITS:
        needed = needed.to_integral_value(rounding=ROUND_CEILING)
    return needed


@dataclass
class LedgerEntry:
    model: Type[Model]
    object_id: UUID
    field_name: str
    amount: float
    label: str


@dataclass
class StockLedger:
    """Compensating-action log of decrements applied during one order."""
    entries: List[LedgerEntry] = field(default_factory=list)

    def record(self, model: Type[Model], object_id: UUID, field_name: str, amount, label: str) -> None:
        self.entries.append(LedgerEntry(model, object_id, field_name, amount, label))

    @property
    def inventory_item_ids(self) -> List[UUID]:
        return [e.object_id for e in self.entries if e.model is InventoryItem]

    async def rollback(self) -> None:
        """Re-applies every recorded decrement as an increment, newest first."""
        while self.entries:
            entry = self.entries[-1]
            await entry.model.filter(id=entry.object_id).update(
                **{entry.field_name: F(entry.field_name) + entry.amount}
            )
            self.entries.pop()
            log.info(f"Compensated {entry.label}: +{entry.amount} {entry.field_name}")


async def deduct_premade(product: Product, quantity: int, ledger: StockLedger) -> None:
    updated = await Product.filter(id=product.id, stock_quantity__gte=quantity).update(
        stock_quantity=F("stock_quantity") - quantity
    )
    if not updated:
        current = await Product.get_or_none(id=product.id)
        available = current.stock_quantity if current else 0
        log.warning(f"Pre-made stock short for '{product.name}': need {quantity}, have {available}")
        raise InsufficientStock(product.name, quantity, available)
    ledger.record(Product, product.id, "stock_quantity", quantity, product.name)


async def deduct_ingredients(product: Product, quantity: int, ledger: StockLedger) -> None:
    for line in product.recipe:
        item_id = line.get("inventory_item_id")
        item = await InventoryItem.get_or_none(id=item_id)
        if not item:
            needed = ingredient_amount(line.get("quantity_required", 0), quantity, line.get("unit"))
            log.warning(f"Recipe for '{product.name}' references missing ingredient {item_id}")
            raise InsufficientStock(f"Unknown ({item_id})", needed, 0)

        # The inventory record's unit is authoritative for piece rounding
        needed = ingredient_amount(line.get("quantity_required", 0), quantity, item.unit or line.get("unit"))
        amount = float(needed)
        updated = await InventoryItem.filter(id=item.id, current_stock__gte=amount).update(
            current_stock=F("current_stock") - amount
        )
        if not updated:
            current = await InventoryItem.get_or_none(id=item.id)
            available = current.current_stock if current else 0
            log.warning(f"Ingredient short for '{item.name}': need {amount}, have {available}")
            raise InsufficientStock(item.name, needed, available)
        ledger.record(InventoryItem, item.id, "current_stock", amount, item.name)


async def deduct_for_line(product: Product, quantity: int, ledger: StockLedger) -> DeductionPlan:
    """Applies the deduction plan for one cart line, recording into `ledger`."""
    plan = plan_deduction(product, quantity)
    if plan.is_untracked:
        log.warning(f"'{product.name}' has no stock tracking; serving {quantity} without deduction")
        return plan
    if plan.from_premade:
        await deduct_premade(product, plan.from_premade, ledger)
    if plan.from_recipe:
        await deduct_ingredients(product, plan.from_recipe, ledger)
    return plan
