import logging
from fastapi import APIRouter, Depends, Query, status
from cafe_api.core.auth import require
from cafe_api.models.user import User
from cafe_api.schemas.product import ProductRequest, RecipeLine
from cafe_api.schemas.response import SuccessResponse
from cafe_api.services.product_service import (
    build_product_response,
    create_product,
    delete_product,
    enrich_recipe,
    get_product,
    list_favorites,
    list_products,
    replace_recipe,
    update_product,
)
from typing import List
from uuid import UUID

log = logging.getLogger("uvicorn")

router = APIRouter()


async def _products_data(products):
    return [(await build_product_response(p)).model_dump(mode="json") for p in products]


@router.get("/menu", response_model=SuccessResponse)
async def get_menu():
    """Public menu: available products only."""
    products = await list_products(available_only=True)
    return SuccessResponse(data=await _products_data(products))


@router.get("/favorites", response_model=SuccessResponse)
async def get_favorites(
    limit: int = Query(5, ge=1, le=20),
    user: User = Depends(require("menu:favorites")),
):
    """The café's best sellers that can still be ordered."""
    products = await list_favorites(limit)
    return SuccessResponse(data=await _products_data(products))


@router.get("", response_model=SuccessResponse)
async def list_products_endpoint(user: User = Depends(require("menu:read"))):
    products = await list_products()
    return SuccessResponse(data=await _products_data(products))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_product_endpoint(payload: ProductRequest, user: User = Depends(require("menu:manage"))):
    product = await create_product(payload)
    return SuccessResponse(data=(await build_product_response(product)).model_dump(mode="json"))


@router.get("/{product_id}", response_model=SuccessResponse)
async def get_product_endpoint(product_id: UUID):
    product = await get_product(product_id)
    return SuccessResponse(data=(await build_product_response(product)).model_dump(mode="json"))


@router.put("/{product_id}", response_model=SuccessResponse)
async def update_product_endpoint(
    product_id: UUID,
    payload: ProductRequest,
    user: User = Depends(require("menu:manage")),
):
    product = await update_product(product_id, payload)
    log.info(f"Product '{product.name}' updated by {user.username}.")
    return SuccessResponse(data=(await build_product_response(product)).model_dump(mode="json"))


@router.delete("/{product_id}", response_model=SuccessResponse)
async def delete_product_endpoint(product_id: UUID, user: User = Depends(require("menu:manage"))):
    await delete_product(product_id)
    return SuccessResponse(data={"message": "Product deleted successfully.", "product_id": str(product_id)})


@router.get("/{product_id}/recipe", response_model=SuccessResponse)
async def get_recipe_endpoint(product_id: UUID, user: User = Depends(require("menu:read"))):
    product = await get_product(product_id)
    recipe = await enrich_recipe(product.recipe)
    return SuccessResponse(data=[line.model_dump() for line in recipe])


@router.put("/{product_id}/recipe", response_model=SuccessResponse)
async def replace_recipe_endpoint(
    product_id: UUID,
    recipe: List[RecipeLine],
    user: User = Depends(require("menu:manage")),
):
    """Replaces the whole recipe. Every ingredient must exist."""
    product = await replace_recipe(product_id, recipe)
    enriched = await enrich_recipe(product.recipe)
    return SuccessResponse(data=[line.model_dump() for line in enriched])
