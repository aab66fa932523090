from tortoise import fields
from tortoise.models import Model


class Tag(Model):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=255, unique=True)  # case-sensitive

    class Meta:
        table = "tags"


class UserTag(Model):
    id = fields.IntField(primary_key=True)
    user = fields.ForeignKeyField("models.User", related_name="tag_links", on_delete=fields.CASCADE)
    tag = fields.ForeignKeyField("models.Tag", related_name="user_links", on_delete=fields.CASCADE)

    class Meta:
        table = "user_tags"
        unique_together = (("user", "tag"),)
