# ywd_admin/models/profile.py
"""
Role-specific profile nodes.
A cadet or instructor user owns exactly one profile, linked by
``is_cadet`` / ``is_instructor``. Profiles are created empty at provisioning.
"""
import uuid
from tortoise import fields, models

from .user import User


class Cadet(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    hours_already = fields.FloatField(default=0)  # Hours driven before the platform was adopted

    class Meta:
        table = "cadet"


class Instructor(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)

    class Meta:
        table = "instructor"


class IsCadet(models.Model):
    """Relation User -> Cadet."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="is_cadet_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Cadet] = fields.ForeignKeyField(
        "models.Cadet", related_name="is_cadet_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "is_cadet"


class IsInstructor(models.Model):
    """Relation User -> Instructor."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="is_instructor_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Instructor] = fields.ForeignKeyField(
        "models.Instructor", related_name="is_instructor_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "is_instructor"
