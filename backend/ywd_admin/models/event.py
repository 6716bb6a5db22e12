# ywd_admin/models/event.py
"""
Calendar events (lessons, exams). Read-only for the admin panel.
"""
import uuid
from tortoise import fields, models

from .profile import Cadet, Instructor


class EventType(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    code = fields.CharField(max_length=32, unique=True)  # "lesson" | "exam"
    name = fields.CharField(max_length=64)

    class Meta:
        table = "event_types"


class Event(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    date_time = fields.DatetimeField(index=True)

    class Meta:
        table = "event"


class OfType(models.Model):
    """Relation Event -> EventType."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[Event] = fields.ForeignKeyField(
        "models.Event", related_name="of_type_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[EventType] = fields.ForeignKeyField(
        "models.EventType", related_name="of_type_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "of_type"


class EventOfCadet(models.Model):
    """Relation Event -> Cadet."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[Event] = fields.ForeignKeyField(
        "models.Event", related_name="event_of_cadet_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Cadet] = fields.ForeignKeyField(
        "models.Cadet", related_name="event_of_cadet_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "event_of_cadet"


class EventOfInstructor(models.Model):
    """Relation Event -> Instructor."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[Event] = fields.ForeignKeyField(
        "models.Event", related_name="event_of_instructor_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Instructor] = fields.ForeignKeyField(
        "models.Instructor", related_name="event_of_instructor_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "event_of_instructor"
