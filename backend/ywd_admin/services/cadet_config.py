# ywd_admin/services/cadet_config.py
"""
Cadet configuration.

A configuration is never edited in place: every save appends a new
PlanHistory snapshot linked to the cadet, the assigned instructor, the
payment plan and the transmission type. The latest snapshot (by date_time,
then insertion order) is the cadet's current configuration.
"""
import logging
from typing import Any

from tortoise import timezone

from ywd_admin.core.errors import PlanNotFound, TransmissionNotFound, ValidationError
from ywd_admin.core.gateway import GraphGateway, parse_ref
from ywd_admin.core.reference import TRANSMISSION_AUTOMATIC, TRANSMISSION_MANUAL
from ywd_admin.models import PlanHistory
from ywd_admin.services.lookups import (
    cadet_profile_id,
    instructor_profile_id,
    to_number,
    user_summary,
)

logger = logging.getLogger("uvicorn.error")

LATEST_FIRST = ("-date_time", "-id")


def default_config() -> dict:
    """Configuration of a cadet that has never been configured."""
    return {
        "paymentPlan": "",
        "instructorId": "",
        "isAutomatic": False,
        "spentHours": 0,
        "bonusHours": 0,
    }


async def latest_history(gw: GraphGateway, cadet_id: Any) -> PlanHistory | None:
    return await gw.find_one("plan_history", order_by=LATEST_FIRST, of_cadet_out__target_id=cadet_id)


async def get_cadet_config(gw: GraphGateway, user_id: Any) -> dict:
    """
    Current configuration of the cadet owned by ``user_id``.

    Returns ``default_config()`` when the cadet has no PlanHistory yet.
    Raises CadetNotFound when the user is unknown or is not a cadet.
    """
    cadet_id = await cadet_profile_id(gw, user_id)
    history = await latest_history(gw, cadet_id)
    if history is None:
        return default_config()

    cadet = await gw.select("cadet", cadet_id)

    instructor_user_id = None
    instructor_id = await gw.first_target("assigned_instructor", history.id)
    if instructor_id is not None:
        instructor_user_id = await gw.first_source("is_instructor", instructor_id)

    plan_id = await gw.first_target("related_plan", history.id)

    transmission_name = None
    transmission_id = await gw.first_target("related_transmission", history.id)
    if transmission_id is not None:
        transmission = await gw.select("transmissions", transmission_id)
        transmission_name = transmission.name if transmission else None

    return {
        "paymentPlan": str(plan_id) if plan_id else "",
        "instructorId": str(instructor_user_id) if instructor_user_id else "",
        "isAutomatic": transmission_name == TRANSMISSION_AUTOMATIC,
        "spentHours": (cadet.hours_already if cadet else 0) or 0,
        "bonusHours": history.bonus_hours or 0,
    }


async def configure_cadet(
    gw: GraphGateway,
    user_id: Any,
    *,
    payment_plan: str,
    instructor_id: str,
    is_automatic: bool = False,
    spent_hours: Any = 0,
    bonus_hours: Any = 0,
) -> PlanHistory:
    """
    Save a new configuration snapshot for a cadet.

    ``spent_hours`` overwrites the cadet's hours_already (it is not added).
    Both hour values fall back to 0 when they can't be read as numbers.

    Raises:
        ValidationError: plan or instructor reference missing
        CadetNotFound / InstructorNotFound / PlanNotFound: dangling reference
        TransmissionNotFound: transmission reference data is missing
    """
    if not payment_plan or not instructor_id:
        raise ValidationError("Необходимо выбрать план оплаты и инструктора")

    async with gw.atomic():
        # 1) resolve references
        cadet_id = await cadet_profile_id(gw, user_id)
        instructor = await instructor_profile_id(gw, parse_ref(instructor_id, "users"))
        plan = await gw.select("plan", parse_ref(payment_plan, "plan"))
        if plan is None:
            raise PlanNotFound()

        # 2) hours already driven
        await gw.merge("cadet", cadet_id, {"hours_already": to_number(spent_hours)})

        # 3) transmission
        transmission_name = TRANSMISSION_AUTOMATIC if is_automatic else TRANSMISSION_MANUAL
        transmission = await gw.find_one("transmissions", name=transmission_name)
        if transmission is None:
            raise TransmissionNotFound(f"Тип трансмиссии '{transmission_name}' не найден")

        # 4) snapshot
        history = await gw.create(
            "plan_history",
            {"date_time": timezone.now(), "bonus_hours": to_number(bonus_hours)},
        )

        # 5) relations
        await gw.relate("of_cadet", history.id, cadet_id)
        await gw.relate("assigned_instructor", history.id, instructor)
        await gw.relate("related_plan", history.id, plan.id)
        await gw.relate("related_transmission", history.id, transmission.id)

    logger.info(
        "[cadet-config] cadet=%s history=%s plan=%s instructor=%s",
        cadet_id, history.id, plan.id, instructor,
    )
    return history


async def list_assigned_cadets(gw: GraphGateway, instructor_user_id: Any) -> list[dict]:
    """
    Cadets whose current configuration points at the given instructor.
    Older snapshots naming the instructor do not count.
    """
    instructor_id = await instructor_profile_id(gw, instructor_user_id)

    # cadet -> latest snapshot, walking snapshots oldest first
    history_cadet = dict(await gw.edges("of_cadet"))
    latest_by_cadet: dict = {}
    for history in await gw.find("plan_history", order_by=("date_time", "id")):
        cadet_id = history_cadet.get(history.id)
        if cadet_id is not None:
            latest_by_cadet[cadet_id] = history.id

    history_instructor = dict(await gw.edges("assigned_instructor"))
    cadet_ids = [
        cadet_id
        for cadet_id, history_id in latest_by_cadet.items()
        if history_instructor.get(history_id) == instructor_id
    ]
    if not cadet_ids:
        return []

    cadet_user = {target: source for source, target in await gw.edges("is_cadet", target_id__in=cadet_ids)}
    cadets = {c.id: c for c in await gw.find("cadet", id__in=cadet_ids)}
    users = {u.id: u for u in await gw.find("users", id__in=list(cadet_user.values()))}

    items = []
    for cadet_id in cadet_ids:
        user = users.get(cadet_user.get(cadet_id))
        if user is None:
            continue
        item = user_summary(user, "cadet")
        item["spentHours"] = cadets[cadet_id].hours_already if cadet_id in cadets else 0
        items.append(item)
    items.sort(key=lambda i: (i["surname"], i["name"]))
    return items
