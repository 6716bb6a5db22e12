# ywd_admin/models/plan.py
"""
Training plans and the append-only plan history.

Each PlanHistory row is a snapshot of a cadet's configuration. The snapshot
with the greatest ``date_time`` is the cadet's current configuration; older
snapshots are kept for history and never modified.
"""
import uuid
from tortoise import fields, models

from .profile import Cadet, Instructor


class Plan(models.Model):
    """Payment plan reference data."""
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=128)
    practice_hours = fields.IntField()
    theory_hours = fields.IntField(default=0)
    price = fields.FloatField()

    class Meta:
        table = "plan"


class Transmission(models.Model):
    """Static reference data, looked up by name ("Механическая" / "Автоматическая")."""
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=64, unique=True)

    class Meta:
        table = "transmissions"


class PlanHistory(models.Model):
    # Integer key doubles as a tie-breaker for snapshots sharing a timestamp
    id = fields.IntField(pk=True)
    date_time = fields.DatetimeField(index=True)
    bonus_hours = fields.FloatField(default=0)

    class Meta:
        table = "plan_history"


class OfCadet(models.Model):
    """Relation PlanHistory -> Cadet."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[PlanHistory] = fields.ForeignKeyField(
        "models.PlanHistory", related_name="of_cadet_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Cadet] = fields.ForeignKeyField(
        "models.Cadet", related_name="of_cadet_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "of_cadet"


class AssignedInstructor(models.Model):
    """Relation PlanHistory -> Instructor."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[PlanHistory] = fields.ForeignKeyField(
        "models.PlanHistory", related_name="assigned_instructor_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Instructor] = fields.ForeignKeyField(
        "models.Instructor", related_name="assigned_instructor_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "assigned_instructor"


class RelatedPlan(models.Model):
    """Relation PlanHistory -> Plan."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[PlanHistory] = fields.ForeignKeyField(
        "models.PlanHistory", related_name="related_plan_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Plan] = fields.ForeignKeyField(
        "models.Plan", related_name="related_plan_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "related_plan"


class RelatedTransmission(models.Model):
    """Relation PlanHistory -> Transmission."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[PlanHistory] = fields.ForeignKeyField(
        "models.PlanHistory", related_name="related_transmission_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Transmission] = fields.ForeignKeyField(
        "models.Transmission", related_name="related_transmission_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "related_transmission"
