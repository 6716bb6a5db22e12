# ywd_admin/core/bootstrap.py
"""
Bootstrap module for application initialization.
Seeds static reference data and creates a default admin on first startup.
"""
import logging

from ywd_admin.config import settings
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.core.reference import EVENT_TYPES, ROLE_ADMIN, ROLES, TRANSMISSIONS
from ywd_admin.services.provisioning import provision_user

logger = logging.getLogger("uvicorn.error")


async def seed_reference_data(gw: GraphGateway) -> None:
    """
    Make sure roles, transmissions and event types exist.
    Existing rows are left untouched, so this is safe on every startup.
    """
    created = 0
    for code, name in ROLES.items():
        if await gw.find_one("roles", code=code) is None:
            await gw.create("roles", {"code": code, "name": name})
            created += 1
    for name in TRANSMISSIONS:
        if await gw.find_one("transmissions", name=name) is None:
            await gw.create("transmissions", {"name": name})
            created += 1
    for code, name in EVENT_TYPES.items():
        if await gw.find_one("event_types", code=code) is None:
            await gw.create("event_types", {"code": code, "name": name})
            created += 1
    if created:
        logger.info("[bootstrap] seeded %d reference records", created)


async def ensure_default_admin(gw: GraphGateway) -> None:
    """
    If no admin exists, provision one from the environment.
    Only takes effect when ADMIN_PHONE and ADMIN_PASSWORD are both set.
    """
    admin_role = await gw.find_one("roles", code=ROLE_ADMIN)
    if admin_role is not None and await gw.sources("of_role", admin_role.id):
        return  # Skip creation if an admin already exists

    if not (settings.admin_phone and settings.admin_password):
        logger.warning("[bootstrap] No admin present, but ADMIN_PHONE/ADMIN_PASSWORD not set -> skip creating default admin.")
        return

    user = await provision_user(
        gw,
        name=settings.admin_name,
        surname=settings.admin_surname,
        phone=settings.admin_phone,
        password=settings.admin_password,
        role=ROLE_ADMIN,
    )
    logger.warning("[bootstrap] Created default admin -> phone=%s id=%s", user.phone, user.id)
