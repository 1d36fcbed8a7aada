from enum import Enum
from tortoise import fields, models
import uuid


class Role(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"


class User(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    username = fields.CharField(max_length=64, unique=True)
    email = fields.CharField(max_length=255, null=True)
    name = fields.CharField(max_length=255, null=True)
    password_hash = fields.CharField(max_length=255)
    role = fields.CharEnumField(Role, default=Role.CUSTOMER)
    is_active = fields.BooleanField(default=True)
    phone_number = fields.CharField(max_length=32, null=True)
    address = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    deleted_at = fields.DatetimeField(null=True)  # Soft delete

    class Meta:
        table = "users"
        indexes = [
            ("email",),
            ("role",),
        ]
