import logging
from fastapi import APIRouter, Depends, Query, status
from cafe_api.core.auth import get_current_user, require
from cafe_api.models.user import Role, User
from cafe_api.schemas.response import SuccessResponse
from cafe_api.schemas.user import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from cafe_api.services.user_service import (
    authenticate,
    create_user,
    issue_token,
    list_users,
    soft_delete_user,
    update_user,
)
from typing import Optional
from uuid import UUID

log = logging.getLogger("uvicorn")

router = APIRouter()
users_router = APIRouter()


def _user_data(user: User):
    return UserResponse.model_validate(user).model_dump(mode="json")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def register(payload: RegisterRequest):
    """Self-service sign-up. Always creates a customer account."""
    user = await create_user(payload, role=Role.CUSTOMER)
    return SuccessResponse(data=_user_data(user))


@router.post("/login", response_model=SuccessResponse)
async def login(payload: LoginRequest):
    user = await authenticate(payload.username, payload.password)
    log.info(f"User '{user.username}' logged in.")
    data = TokenResponse(token=issue_token(user), user=UserResponse.model_validate(user))
    return SuccessResponse(data=data.model_dump(mode="json"))


@router.get("/me", response_model=SuccessResponse)
async def me(user: User = Depends(get_current_user)):
    return SuccessResponse(data=_user_data(user))


@users_router.get("", response_model=SuccessResponse)
async def list_users_endpoint(
    role: Optional[Role] = Query(None),
    user: User = Depends(require("users:manage")),
):
    users = await list_users(role)
    return SuccessResponse(data=[_user_data(u) for u in users])


@users_router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_user_endpoint(payload: UserCreateRequest, user: User = Depends(require("users:manage"))):
    created = await create_user(payload, role=payload.role)
    return SuccessResponse(data=_user_data(created))


@users_router.patch("/{user_id}", response_model=SuccessResponse)
async def update_user_endpoint(
    user_id: UUID,
    payload: UserUpdateRequest,
    user: User = Depends(require("users:manage")),
):
    updated = await update_user(user_id, payload)
    return SuccessResponse(data=_user_data(updated))


@users_router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user_endpoint(user_id: UUID, user: User = Depends(require("users:manage"))):
    deleted = await soft_delete_user(user_id)
    return SuccessResponse(data={"message": f"User '{deleted.username}' deactivated.", "user_id": str(user_id)})
