"""
Services Module

Workflows behind the admin API. Each takes the shared GraphGateway first:
- provisioning: create / edit / list users
- cadet_config: append-only cadet configuration snapshots
- instructor_fleet: instructor car reconciliation
- deletion: cascading user deletion, guarded plan deletion
- plans: payment plan and transmission reference data
- chats / calendar: read-only projections
"""

from .provisioning import provision_user, update_user, list_users, list_instructors
from .cadet_config import get_cadet_config, configure_cadet, list_assigned_cadets
from .instructor_fleet import get_instructor_cars, configure_instructor_cars
from .deletion import delete_user, delete_plan
from .plans import list_plans, get_plan, create_plan, update_plan, list_transmissions
from .chats import list_chat_summaries, get_chat_messages
from .calendar import list_events, bucket_by_day

__all__ = [
    # Users
    "provision_user",
    "update_user",
    "list_users",
    "list_instructors",
    "delete_user",
    # Cadets / instructors
    "get_cadet_config",
    "configure_cadet",
    "list_assigned_cadets",
    "get_instructor_cars",
    "configure_instructor_cars",
    # Plans
    "list_plans",
    "get_plan",
    "create_plan",
    "update_plan",
    "delete_plan",
    "list_transmissions",
    # Projections
    "list_chat_summaries",
    "get_chat_messages",
    "list_events",
    "bucket_by_day",
]
