from tortoise import fields, models
import uuid


class ReportLog(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    title = fields.CharField(max_length=255)
    type = fields.CharField(max_length=32)  # sales | inventory
    format = fields.CharField(max_length=32, default="generated")
    generated_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "report_logs"
