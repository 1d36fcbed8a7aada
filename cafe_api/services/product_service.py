import logging
from collections import Counter
from typing import Dict, List, Optional
from uuid import UUID

from cafe_api.core.errors import CartValidationError, NotFoundError
from cafe_api.models.inventory import InventoryItem
from cafe_api.models.order import OrderItem
from cafe_api.models.product import Product
from cafe_api.schemas.product import ProductRequest, ProductResponse, RecipeLine, RecipeLineResponse
from cafe_api.services.inventory_service import is_product_low

log = logging.getLogger("product_service")


async def _ingredient_names(recipe: List[dict]) -> Dict[str, str]:
    ids = [line.get("inventory_item_id") for line in recipe if line.get("inventory_item_id")]
    if not ids:
        return {}
    items = await InventoryItem.filter(id__in=ids)
    return {str(item.id): item.name for item in items}


async def enrich_recipe(recipe: Optional[List[dict]]) -> List[RecipeLineResponse]:
    """Recipe lines with ingredient names; deleted ingredients show as 'Unknown (<id>)'."""
    recipe = recipe or []
    names = await _ingredient_names(recipe)
    enriched = []
    for line in recipe:
        item_id = str(line.get("inventory_item_id"))
        enriched.append(RecipeLineResponse(
            inventory_item_id=item_id,
            name=names.get(item_id, f"Unknown ({item_id})"),
            quantity_required=float(line.get("quantity_required", 0)),
            unit=line.get("unit") or "pcs",
        ))
    return enriched


async def build_product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        price=product.price,
        stock_quantity=product.stock_quantity,
        low_stock_threshold=product.low_stock_threshold,
        category=product.category,
        is_available=product.is_available,
        is_low_stock=is_product_low(product),
        image_url=product.image_url,
        has_sizes=product.has_sizes,
        sizes=product.sizes or [],
        has_moods=product.has_moods,
        moods=product.moods or [],
        has_sugar_levels=product.has_sugar_levels,
        sugar_levels=product.sugar_levels or [],
        stock_mode=product.stock_mode,
        recipe=await enrich_recipe(product.recipe),
    )


async def validate_recipe(recipe: List[RecipeLine]) -> List[dict]:
    """Checks every ingredient exists and returns the recipe in its stored JSON form."""
    ids = {line.inventory_item_id for line in recipe}
    if ids:
        found = await InventoryItem.filter(id__in=list(ids)).values_list("id", flat=True)
        missing = ids - {UUID(str(item_id)) for item_id in found}
        if missing:
            raise CartValidationError(
                "Recipe references unknown inventory items.",
                {"missing": sorted(str(item_id) for item_id in missing)},
            )
    return [line.model_dump(mode="json") for line in recipe]


async def list_products(available_only: bool = False) -> List[Product]:
    query = Product.all()
    if available_only:
        query = query.filter(is_available=True)
    return await query.order_by("category", "name")


async def list_favorites(limit: int = 5) -> List[Product]:
    """Best sellers by quantity ordered, limited to products still on the menu."""
    quantities = Counter()
    for item in await OrderItem.all():
        quantities[str(item.product_id)] += item.quantity
    available = {str(p.id): p for p in await list_products(available_only=True)}
    ranked = [available[pid] for pid, _ in quantities.most_common() if pid in available]
    return ranked[:limit]


async def get_product(product_id: UUID) -> Product:
    product = await Product.get_or_none(id=product_id)
    if not product:
        raise NotFoundError(f"Product {product_id} not found.")
    return product


async def create_product(data: ProductRequest) -> Product:
    fields = data.model_dump(exclude={"recipe"})
    fields["recipe"] = await validate_recipe(data.recipe)
    product = await Product.create(**fields)
    log.info(f"Product '{product.name}' added to the menu.")
    return product


async def update_product(product_id: UUID, data: ProductRequest) -> Product:
    product = await get_product(product_id)
    fields = data.model_dump(exclude={"recipe"})
    fields["recipe"] = await validate_recipe(data.recipe)
    product.update_from_dict(fields)
    await product.save()
    return product


async def delete_product(product_id: UUID) -> None:
    product = await get_product(product_id)
    await product.delete()
    log.info(f"Product '{product.name}' removed from the menu.")


async def replace_recipe(product_id: UUID, recipe: List[RecipeLine]) -> Product:
    product = await get_product(product_id)
    product.recipe = await validate_recipe(recipe)
    await product.save()
    log.info(f"Recipe for '{product.name}' replaced ({len(recipe)} ingredient(s)).")
    return product
