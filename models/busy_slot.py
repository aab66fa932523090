from tortoise import fields
from tortoise.models import Model
from uuid import uuid4


def generate_busy_id() -> str:
    return f"busy_{uuid4().hex}"


class BusySlot(Model):
    id = fields.CharField(max_length=40, primary_key=True, default=generate_busy_id)
    user = fields.ForeignKeyField("models.User", related_name="busy_slots", on_delete=fields.CASCADE)
    # [starts_at, ends_at), starts_at < ends_at
    starts_at = fields.DatetimeField(source_field="from")
    ends_at = fields.DatetimeField(source_field="to")
    reason = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "busy_slots"
        indexes = (("starts_at", "ends_at"),)
