# ywd_admin/services/provisioning.py
"""
User provisioning: create the user node, link its role, and create the
role-specific profile for cadets and instructors.

The steps run inside one gateway transaction. A missing role is also
compensated explicitly by deleting the freshly created user before
RoleNotFound is raised.
"""
import logging
from typing import Any

from ywd_admin.config import settings
from ywd_admin.core.errors import PhoneTaken, RoleNotFound, ValidationError
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.core.phone import normalize_phone
from ywd_admin.core.reference import PROFILE_ROLES, ROLE_INSTRUCTOR
from ywd_admin.core.security import hash_password
from ywd_admin.models import User
from ywd_admin.services.lookups import get_user, roles_by_user, user_summary

logger = logging.getLogger("uvicorn.error")


def derive_email(phone: str) -> str:
    return f"{normalize_phone(phone)}@{settings.email_domain}"


async def _ensure_phone_free(gw: GraphGateway, phone: str, exclude_id: Any = None) -> None:
    holder = await gw.find_one("users", phone=phone)
    if holder is not None and (exclude_id is None or str(holder.id) != str(exclude_id)):
        raise PhoneTaken()


async def provision_user(
    gw: GraphGateway,
    *,
    name: str,
    surname: str,
    phone: str,
    password: str,
    role: str,
    patronymic: str | None = None,
) -> User:
    """
    Create a user with its role relation and, for cadets and instructors,
    an empty profile node.

    Raises:
        ValidationError: required field missing
        PhoneTaken: the normalized phone already belongs to a user
        RoleNotFound: no role node with the given code
    """
    if not (name and surname and phone and password and role):
        raise ValidationError("Все поля обязательны")

    canonical = normalize_phone(phone)
    async with gw.atomic():
        await _ensure_phone_free(gw, canonical)

        # 1) credentials + 2) user node
        user = await gw.create(
            "users",
            {
                "name": name,
                "surname": surname,
                "patronymic": patronymic or None,
                "phone": canonical,
                "password_hash": hash_password(password),
                "email": derive_email(canonical),
                "avatar": "",
            },
        )

        # 3) role lookup, with compensation when it is missing
        role_node = await gw.find_one("roles", code=role)
        if role_node is None:
            await gw.delete("users", user.id)
            logger.warning("[provision] role %r not found, removed user %s", role, user.id)
            raise RoleNotFound(f"Роль '{role}' не найдена")

        # 4) of_role
        await gw.relate("of_role", user.id, role_node.id)

        # 5) role-specific profile
        if role in PROFILE_ROLES:
            profile = await gw.create(role, {})
            await gw.relate(f"is_{role}", user.id, profile.id)

    logger.info("[provision] created user %s role=%s", user.id, role)
    return user


async def update_user(
    gw: GraphGateway,
    user_id: Any,
    *,
    name: str | None = None,
    surname: str | None = None,
    patronymic: str | None = None,
    phone: str | None = None,
    password: str | None = None,
) -> User:
    """
    Edit identity fields; only the provided ones change. A new phone is
    normalized, checked for uniqueness and re-derives the email. A non-empty
    password is re-hashed. The role is never changed here.
    """
    user = await get_user(gw, user_id)

    changes: dict = {}
    if name:
        changes["name"] = name
    if surname:
        changes["surname"] = surname
    if patronymic is not None:
        changes["patronymic"] = patronymic or None
    if phone:
        canonical = normalize_phone(phone)
        if canonical != user.phone:
            await _ensure_phone_free(gw, canonical, exclude_id=user.id)
            changes["phone"] = canonical
            changes["email"] = derive_email(canonical)
    if password:
        changes["password_hash"] = hash_password(password)

    if not changes:
        return user
    updated = await gw.merge("users", user.id, changes)
    logger.info("[users] updated %s fields=%s", user.id, sorted(k for k in changes if k != "password_hash"))
    return updated


def _matches(user: User, query: str) -> bool:
    full_name = f"{user.name} {user.surname} {user.patronymic or ''}".lower()
    return query in full_name or query in user.phone.lower()


async def list_users(gw: GraphGateway, q: str | None = None, role: str | None = None) -> list[dict]:
    """All users with their resolved role, optionally filtered by text and role code."""
    roles = await roles_by_user(gw)
    query = (q or "").strip().lower()
    items = []
    for user in await gw.find("users", order_by=("surname", "name")):
        user_role = roles.get(user.id)
        if role and user_role != role:
            continue
        if query and not _matches(user, query):
            continue
        items.append(user_summary(user, user_role))
    return items


async def list_instructors(gw: GraphGateway) -> list[dict]:
    return await list_users(gw, role=ROLE_INSTRUCTOR)
