import logging
from fastapi import APIRouter, Depends, Query
from cafe_api.core.auth import get_current_user, require
from cafe_api.models.user import Role, User
from cafe_api.schemas.notification import NotificationResponse
from cafe_api.schemas.response import SuccessResponse
from cafe_api.services.notification_service import list_for_customer, list_for_role, list_unread, mark_as_read
from uuid import UUID

log = logging.getLogger("uvicorn")

router = APIRouter()


def _notifications_data(notifications):
    return [NotificationResponse.model_validate(n).model_dump(mode="json") for n in notifications]


@router.get("/staff", response_model=SuccessResponse)
async def staff_notifications(
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(require("notifications:staff")),
):
    """Latest notices for the caller's role (staff or admin)."""
    notifications = await list_for_role(Role(user.role).value, limit=limit)
    return SuccessResponse(data=_notifications_data(notifications))


@router.get("/customer", response_model=SuccessResponse)
async def customer_notifications(
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(require("notifications:own")),
):
    notifications = await list_for_customer(str(user.id), limit=limit)
    return SuccessResponse(data=_notifications_data(notifications))


@router.get("/unread", response_model=SuccessResponse)
async def unread_notifications(user: User = Depends(require("notifications:staff"))):
    return SuccessResponse(data=_notifications_data(await list_unread()))


@router.post("/{notification_id}/read", response_model=SuccessResponse)
async def read_notification(notification_id: UUID, user: User = Depends(get_current_user)):
    notification = await mark_as_read(notification_id, user)
    return SuccessResponse(data=NotificationResponse.model_validate(notification).model_dump(mode="json"))
