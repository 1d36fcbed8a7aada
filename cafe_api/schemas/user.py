import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from cafe_api.models.user import Role


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=6)
    email: Optional[str] = None
    name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None


class UserCreateRequest(RegisterRequest):
    """Admin-side creation, any role allowed."""
    role: Role = Role.STAFF


class UserUpdateRequest(BaseModel):
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    name: Optional[str] = None
    email: Optional[str] = None


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Role
    is_active: bool
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
