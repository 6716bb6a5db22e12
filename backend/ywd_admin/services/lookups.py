# ywd_admin/services/lookups.py
"""
Traversal helpers shared by the workflows: user <-> role, user <-> profile.
Each helper is a single relation hop through the gateway.
"""
import math
from typing import Any

from ywd_admin.core.errors import CadetNotFound, InstructorNotFound, UserNotFound
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.models import User


def to_number(value: Any, default: float = 0.0) -> float:
    """Lenient number coercion for form input: "12.5", "12,5", 3 -> 12.5, 12.5, 3.0; junk -> default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip().replace(",", "."))
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def to_int(value: Any, default: int = 0) -> int:
    """Whole-number variant of ``to_number``; the fractional part is dropped."""
    return int(to_number(value, default))


def user_summary(user: User, role: str | None = None) -> dict:
    data = {
        "id": str(user.id),
        "name": user.name,
        "surname": user.surname,
        "patronymic": user.patronymic,
        "phone": user.phone,
    }
    if role is not None:
        data["role"] = role
    return data


async def get_user(gw: GraphGateway, user_id: Any) -> User:
    user = await gw.select("users", user_id)
    if user is None:
        raise UserNotFound()
    return user


async def role_codes(gw: GraphGateway) -> dict:
    """Role node id -> role code."""
    return {r.id: r.code for r in await gw.find("roles")}


async def roles_by_user(gw: GraphGateway) -> dict:
    """User id -> role code for every user holding a role."""
    codes = await role_codes(gw)
    return {source: codes.get(target) for source, target in await gw.edges("of_role")}


async def role_of(gw: GraphGateway, user_id: Any) -> str | None:
    role_id = await gw.first_target("of_role", user_id)
    if role_id is None:
        return None
    role = await gw.select("roles", role_id)
    return role.code if role else None


async def cadet_profile_id(gw: GraphGateway, user_id: Any):
    """User -> is_cadet -> Cadet; raises CadetNotFound when the user has no cadet profile."""
    user = await get_user(gw, user_id)
    cadet_id = await gw.first_target("is_cadet", user.id)
    if cadet_id is None:
        raise CadetNotFound()
    return cadet_id


async def instructor_profile_id(gw: GraphGateway, user_id: Any):
    """User -> is_instructor -> Instructor; raises InstructorNotFound when absent."""
    user = await gw.select("users", user_id)
    if user is None:
        raise InstructorNotFound()
    instructor_id = await gw.first_target("is_instructor", user.id)
    if instructor_id is None:
        raise InstructorNotFound()
    return instructor_id
