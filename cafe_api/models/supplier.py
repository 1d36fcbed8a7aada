from tortoise import fields, models
import uuid


class Supplier(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    contact_person = fields.CharField(max_length=255, default="")
    email = fields.CharField(max_length=255)
    phone = fields.CharField(max_length=64, default="")
    address = fields.TextField(null=True)

    class Meta:
        table = "suppliers"
