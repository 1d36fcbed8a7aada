from tortoise import fields, models
import uuid


class Notification(models.Model):
    """
    Append-only log of system messages. Notifications are never deleted;
    they are retired by marking them read.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    message = fields.TextField()
    type = fields.CharField(max_length=16, default="info")  # info | warning | success
    category = fields.CharField(max_length=32, default="system")  # order | inventory | system
    target_role = fields.CharField(max_length=16, default="staff")  # staff | admin | customer
    customer_id = fields.CharField(max_length=64, null=True)
    related_id = fields.CharField(max_length=64, null=True)  # Order or inventory item id
    is_read = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "notifications"
        indexes = [
            ("target_role", "created_at"),
            ("customer_id",),
            ("is_read",),
        ]
