# ywd_admin/services/plans.py
"""Payment plans and transmission reference data. Deletion lives in services.deletion."""
import logging
from typing import Any

from ywd_admin.core.errors import PlanNotFound, ValidationError
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.models import Plan
from ywd_admin.services.lookups import to_int

logger = logging.getLogger("uvicorn.error")


def plan_to_dict(plan: Plan) -> dict:
    return {
        "id": str(plan.id),
        "name": plan.name,
        "practice_hours": plan.practice_hours,
        "theory_hours": plan.theory_hours,
        "price": plan.price,
    }


def _price(value: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Некорректная стоимость") from None
    if price < 0:
        raise ValidationError("Некорректная стоимость")
    return price


async def list_plans(gw: GraphGateway) -> list[dict]:
    return [plan_to_dict(p) for p in await gw.find("plan", order_by=("name",))]


async def get_plan(gw: GraphGateway, plan_id: Any) -> dict:
    plan = await gw.select("plan", plan_id)
    if plan is None:
        raise PlanNotFound()
    return plan_to_dict(plan)


async def create_plan(
    gw: GraphGateway,
    *,
    name: str | None,
    practice_hours: Any,
    price: Any,
    theory_hours: Any = 0,
) -> dict:
    if not name or to_int(practice_hours) <= 0 or price is None or price == "":
        raise ValidationError("Название, часы практики и стоимость обязательны")
    plan = await gw.create(
        "plan",
        {
            "name": name,
            "practice_hours": to_int(practice_hours),
            "theory_hours": to_int(theory_hours),
            "price": _price(price),
        },
    )
    logger.info("[plans] created %s", plan.id)
    return plan_to_dict(plan)


async def update_plan(gw: GraphGateway, plan_id: Any, changes: dict) -> dict:
    """Partial update; keys absent from ``changes`` keep their values."""
    data: dict = {}
    if changes.get("name") is not None:
        data["name"] = changes["name"]
    for key in ("practice_hours", "theory_hours"):
        if changes.get(key) is not None:
            data[key] = to_int(changes[key])
    if changes.get("price") is not None:
        data["price"] = _price(changes["price"])

    plan = await gw.merge("plan", plan_id, data) if data else await gw.select("plan", plan_id)
    if plan is None:
        raise PlanNotFound()
    logger.info("[plans] updated %s fields=%s", plan.id, sorted(data))
    return plan_to_dict(plan)


async def list_transmissions(gw: GraphGateway) -> list[dict]:
    return [{"id": str(t.id), "name": t.name} for t in await gw.find("transmissions", order_by=("name",))]
