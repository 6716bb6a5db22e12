# ywd_admin/models/__init__.py
"""
Database models module initialization.

The data is a graph: node tables (users, roles, cadet, instructor, plan,
plan_history, transmissions, cars, chats, messages, event, event_types) and
relation tables with a ``source`` and a ``target`` foreign key (of_role,
is_cadet, is_instructor, of_cadet, assigned_instructor, related_plan,
related_transmission, has_car, sent_by, belongs_to, participates, of_type,
event_of_cadet, event_of_instructor).
"""
from .user import User, Role, OfRole
from .profile import Cadet, Instructor, IsCadet, IsInstructor
from .plan import (
    Plan,
    Transmission,
    PlanHistory,
    OfCadet,
    AssignedInstructor,
    RelatedPlan,
    RelatedTransmission,
)
from .car import Car, HasCar
from .chat import Chat, Message, SentBy, BelongsTo, Participates
from .event import Event, EventType, OfType, EventOfCadet, EventOfInstructor
