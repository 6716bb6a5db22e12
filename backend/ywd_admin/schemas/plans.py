# ywd_admin/schemas/plans.py
from typing import Any

from pydantic import BaseModel


class PlanOut(BaseModel):
    id: str
    name: str
    practice_hours: int
    theory_hours: int
    price: float


class PlanIn(BaseModel):
    """Used for create (name, practice_hours, price required) and partial update."""
    name: str | None = None
    practice_hours: Any = None
    theory_hours: Any = None
    price: Any = None


class TransmissionOut(BaseModel):
    id: str
    name: str
