import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from tortoise.expressions import Q

from cafe_api.core.errors import AuthError, ConflictError, NotFoundError
from cafe_api.core.security import create_access_token, hash_password, verify_password
from cafe_api.models.user import Role, User
from cafe_api.schemas.user import RegisterRequest, UserUpdateRequest

log = logging.getLogger("user_service")


async def create_user(data: RegisterRequest, role: Role = Role.CUSTOMER) -> User:
    """Creates a user after checking username and email are free."""
    clash = Q(username=data.username)
    if data.email:
        clash |= Q(email=data.email)
    if await User.filter(clash).exists():
        raise ConflictError("Username or email is already taken.")

    user = await User.create(
        username=data.username,
        email=data.email,
        name=data.name,
        password_hash=hash_password(data.password),
        role=role,
        phone_number=data.phone_number,
        address=data.address,
    )
    log.info(f"Created {role.value} account '{user.username}'.")
    return user


async def authenticate(username: str, password: str) -> User:
    user = await User.get_or_none(username=username, deleted_at__isnull=True)
    if not user or not verify_password(password, user.password_hash):
        raise AuthError("Invalid credentials.")
    if not user.is_active:
        raise AuthError("Account is inactive or blocked.")
    return user


def issue_token(user: User) -> str:
    role = Role(user.role)
    return create_access_token({"sub": str(user.id), "username": user.username, "role": role.value})


async def list_users(role: Optional[Role] = None) -> List[User]:
    query = User.filter(deleted_at__isnull=True)
    if role:
        query = query.filter(role=role)
    return await query.order_by("username")


async def _get_user(user_id: UUID) -> User:
    user = await User.get_or_none(id=user_id, deleted_at__isnull=True)
    if not user:
        raise NotFoundError(f"User {user_id} not found.")
    return user


async def update_user(user_id: UUID, data: UserUpdateRequest) -> User:
    user = await _get_user(user_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field_name, value in changes.items():
        setattr(user, field_name, value)
    await user.save()
    return user


async def soft_delete_user(user_id: UUID) -> User:
    user = await _get_user(user_id)
    user.deleted_at = datetime.now(timezone.utc)
    user.is_active = False
    await user.save(update_fields=["deleted_at", "is_active"])
    log.info(f"Deactivated account '{user.username}'.")
    return user
