import logging
from typing import Any, List, Optional
from uuid import UUID

from cafe_api.core.errors import NotificationNotFound, PermissionDenied
from cafe_api.models.notification import Notification
from cafe_api.models.user import Role

log = logging.getLogger("notification_service")


async def create_notification(
    message: str,
    type: str = "info",
    category: str = "system",
    target_role: str = "staff",
    customer_id: Optional[str] = None,
    related_id: Optional[Any] = None,
    conn: Any = None,
) -> Notification:
    """
    Appends a notification to the sink.

    Passing 'conn' writes the notification inside the caller's transaction.
    """
    notification = await Notification.create(
        message=message,
        type=type,
        category=category,
        target_role=target_role,
        customer_id=customer_id,
        related_id=str(related_id) if related_id is not None else None,
        using_db=conn,
    )
    log.info(f"Notification [{type}] for {target_role}: {message}")
    return notification


async def list_for_role(role: str, limit: int = 10) -> List[Notification]:
    return await Notification.filter(target_role=role).order_by("-created_at").limit(limit)


async def list_for_customer(customer_id: str, limit: int = 10) -> List[Notification]:
    """Customer feed: notices addressed to this customer, never staff-only ones."""
    return await (
        Notification.filter(customer_id=customer_id)
        .exclude(target_role="staff")
        .order_by("-created_at")
        .limit(limit)
    )


async def list_unread() -> List[Notification]:
    return await Notification.filter(is_read=False).order_by("-created_at")


async def count_unread() -> int:
    return await Notification.filter(is_read=False).count()


async def mark_as_read(notification_id: UUID, user: Any = None) -> Notification:
    """
    Marks one notification read. With a user, only notices addressed to that
    user (customers) or to their role (staff, admin) may be marked.
    """
    notification = await Notification.get_or_none(id=notification_id)
    if not notification:
        raise NotificationNotFound(notification_id)
    if user is not None and not can_mark(notification, user):
        log.warning(f"User {user.id} tried to mark notification {notification_id} it does not own.")
        raise PermissionDenied("You cannot modify this notification.")
    notification.is_read = True
    await notification.save(update_fields=["is_read"])
    return notification


def can_mark(notification: Notification, user: Any) -> bool:
    role = Role(user.role)
    if role == Role.CUSTOMER:
        return notification.target_role == Role.CUSTOMER.value and notification.customer_id == str(user.id)
    if role == Role.ADMIN:
        return notification.target_role in (Role.ADMIN.value, Role.STAFF.value)
    return notification.target_role == role.value
