# ywd_admin/models/car.py
import uuid
from tortoise import fields, models

from .profile import Instructor


class Car(models.Model):
    """
    Vehicle node. The plate number is the natural key: a plate maps to at
    most one Car, which may be shared or re-linked between instructors.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    model = fields.CharField(max_length=128)
    car_number = fields.CharField(max_length=16, unique=True, index=True)
    color = fields.CharField(max_length=64)

    class Meta:
        table = "cars"


class HasCar(models.Model):
    """Relation Instructor -> Car (the instructor's current fleet)."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[Instructor] = fields.ForeignKeyField(
        "models.Instructor", related_name="has_car_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Car] = fields.ForeignKeyField(
        "models.Car", related_name="has_car_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "has_car"
