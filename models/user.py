from tortoise import fields
from tortoise.models import Model
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from models.tag import UserTag
    from models.busy_slot import BusySlot


def generate_user_id() -> str:
    return f"usr_{uuid4().hex}"


class User(Model):
    id = fields.CharField(max_length=40, primary_key=True, default=generate_user_id)
    name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255, unique=True)
    phone = fields.CharField(max_length=50, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    tag_links: fields.ReverseRelation["UserTag"]
    busy_slots: fields.ReverseRelation["BusySlot"]

    class Meta:
        table = "users"
