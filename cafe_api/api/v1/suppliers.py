import logging
from fastapi import APIRouter, Depends, status
from cafe_api.core.auth import require
from cafe_api.core.errors import NotFoundError
from cafe_api.models.supplier import Supplier
from cafe_api.models.user import User
from cafe_api.schemas.response import SuccessResponse
from cafe_api.schemas.supplier import SupplierRequest, SupplierResponse
from uuid import UUID

log = logging.getLogger("uvicorn")

router = APIRouter()


async def _get_supplier(supplier_id: UUID) -> Supplier:
    supplier = await Supplier.get_or_none(id=supplier_id)
    if not supplier:
        raise NotFoundError(f"Supplier {supplier_id} not found.")
    return supplier


def _supplier_data(supplier: Supplier):
    return SupplierResponse.model_validate(supplier).model_dump(mode="json")


@router.get("", response_model=SuccessResponse)
async def list_suppliers(user: User = Depends(require("suppliers:manage"))):
    suppliers = await Supplier.all().order_by("name")
    return SuccessResponse(data=[_supplier_data(s) for s in suppliers])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_supplier(payload: SupplierRequest, user: User = Depends(require("suppliers:manage"))):
    supplier = await Supplier.create(**payload.model_dump())
    log.info(f"Supplier '{supplier.name}' created.")
    return SuccessResponse(data=_supplier_data(supplier))


@router.get("/{supplier_id}", response_model=SuccessResponse)
async def get_supplier(supplier_id: UUID, user: User = Depends(require("suppliers:manage"))):
    return SuccessResponse(data=_supplier_data(await _get_supplier(supplier_id)))


@router.put("/{supplier_id}", response_model=SuccessResponse)
async def update_supplier(
    supplier_id: UUID,
    payload: SupplierRequest,
    user: User = Depends(require("suppliers:manage")),
):
    supplier = await _get_supplier(supplier_id)
    supplier.update_from_dict(payload.model_dump())
    await supplier.save()
    return SuccessResponse(data=_supplier_data(supplier))


@router.delete("/{supplier_id}", response_model=SuccessResponse)
async def delete_supplier(supplier_id: UUID, user: User = Depends(require("suppliers:manage"))):
    supplier = await _get_supplier(supplier_id)
    await supplier.delete()
    return SuccessResponse(data={"message": f"Supplier '{supplier.name}' deleted."})
