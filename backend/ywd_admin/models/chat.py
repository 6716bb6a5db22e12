# ywd_admin/models/chat.py
"""
Chat data written by the mobile application. The admin panel only reads it.
"""
import uuid
from tortoise import fields, models

from .user import User


class Chat(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "chats"


class Message(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    text = fields.TextField()
    date_sent = fields.DatetimeField(index=True)

    class Meta:
        table = "messages"


class SentBy(models.Model):
    """Relation Message -> User."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[Message] = fields.ForeignKeyField(
        "models.Message", related_name="sent_by_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="sent_by_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "sent_by"


class BelongsTo(models.Model):
    """Relation Message -> Chat."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[Message] = fields.ForeignKeyField(
        "models.Message", related_name="belongs_to_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Chat] = fields.ForeignKeyField(
        "models.Chat", related_name="belongs_to_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "belongs_to"


class Participates(models.Model):
    """Relation Chat -> User."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[Chat] = fields.ForeignKeyField(
        "models.Chat", related_name="participates_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="participates_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "participates"
