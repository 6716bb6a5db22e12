# ywd_admin/schemas/config.py
"""
Pydantic schemas for cadet and instructor configuration.
"""
from typing import Any

from pydantic import BaseModel, Field


class CadetConfigIn(BaseModel):
    """
    Cadet configuration form.
    Hour fields accept numbers or numeric strings; unreadable values become 0.
    """
    paymentPlan: str = ""  # Plan id ("<id>" or "plan:<id>")
    instructorId: str = ""  # Instructor's user id ("<id>" or "users:<id>")
    isAutomatic: bool = False  # Automatic vs manual transmission
    spentHours: Any = 0  # Overwrites cadet.hours_already
    bonusHours: Any = 0


class CadetConfigOut(BaseModel):
    paymentPlan: str
    instructorId: str
    isAutomatic: bool
    spentHours: float
    bonusHours: float


class CarIn(BaseModel):
    model: str = ""
    plateNumber: str = ""
    color: str = ""


class CarOut(BaseModel):
    id: str
    model: str
    plateNumber: str
    color: str


class InstructorConfigIn(BaseModel):
    """The instructor's complete fleet; it replaces the current one."""
    cars: list[CarIn] = Field(default_factory=list)
