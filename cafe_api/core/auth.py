"""
Request authentication and the role-based authorization policy.

Routes declare the permission they need with `Depends(require("..."))`;
which roles hold that permission is decided only in POLICY below.
"""
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cafe_api.core.errors import AuthError, PermissionDenied
from cafe_api.core.security import decode_access_token
from cafe_api.models.user import Role, User

security = HTTPBearer(auto_error=False)

STAFF_ROLES = {Role.STAFF, Role.ADMIN}

POLICY = {
    "orders:manage": STAFF_ROLES,
    "orders:own": {Role.CUSTOMER},
    "menu:read": STAFF_ROLES,
    "menu:manage": {Role.ADMIN},
    "menu:favorites": {Role.CUSTOMER},
    "inventory:read": STAFF_ROLES,
    "inventory:alert": STAFF_ROLES,
    "inventory:manage": {Role.ADMIN},
    "suppliers:manage": {Role.ADMIN},
    "notifications:staff": STAFF_ROLES,
    "notifications:own": {Role.CUSTOMER},
    "dashboard:read": {Role.ADMIN},
    "dashboard:staff": STAFF_ROLES,
    "reports:read": {Role.ADMIN},
    "users:manage": {Role.ADMIN},
}


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[User]:
    """The authenticated user, or None for anonymous (walk-in) requests."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Token is missing a subject.")
    try:
        user_id = UUID(str(user_id))
    except ValueError:
        raise AuthError("Token subject is not a valid user id.")
    user = await User.get_or_none(id=user_id, deleted_at__isnull=True)
    if not user or not user.is_active:
        raise AuthError("Account is inactive or no longer exists.")
    return user


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthError("Authentication required.")
    return user


def require(permission: str):
    """Dependency factory: resolves the current user and checks it against POLICY."""
    allowed = POLICY[permission]

    async def checker(user: User = Depends(get_current_user)) -> User:
        if Role(user.role) not in allowed:
            raise PermissionDenied(f"Access denied. '{permission}' requires role: {', '.join(sorted(r.value for r in allowed))}.")
        return user

    return checker
