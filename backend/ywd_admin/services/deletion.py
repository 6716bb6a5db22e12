# ywd_admin/services/deletion.py
"""
Role-aware cascading deletion of users, and guarded deletion of plans.
Dependent records are removed before the root node.
"""
import logging
from typing import Any

from ywd_admin.core.errors import PlanInUse, PlanNotFound, UserNotFound, ValidationError
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.core.reference import ROLE_CADET, ROLE_INSTRUCTOR
from ywd_admin.services.lookups import role_of

logger = logging.getLogger("uvicorn.error")

USER_RELATIONS = ("of_role", "is_cadet", "is_instructor")


async def _delete_cadet_profile(gw: GraphGateway, user_id) -> None:
    for cadet_id in await gw.targets("is_cadet", user_id):
        history_ids = await gw.sources("of_cadet", cadet_id)
        removed = await gw.delete_many("plan_history", history_ids)
        await gw.delete("cadet", cadet_id)
        logger.info("[delete] cadet=%s plan_history removed=%d", cadet_id, removed)


async def _delete_instructor_profile(gw: GraphGateway, user_id) -> None:
    for instructor_id in await gw.targets("is_instructor", user_id):
        removed = await gw.unrelate("has_car", source=instructor_id)
        await gw.delete("instructor", instructor_id)
        logger.info("[delete] instructor=%s car relations removed=%d", instructor_id, removed)


async def delete_user(gw: GraphGateway, user_id: Any, *, acting_user_id: Any = None) -> None:
    """
    Delete a user and everything hanging off its role:
      - cadet: all PlanHistory snapshots of the cadet, then the cadet profile
      - instructor: all car relations, then the instructor profile
      - admin: nothing role-specific
    Then the user's own relations and finally the user node.

    Raises:
        UserNotFound: no such user
        ValidationError: an administrator tried to delete their own account
    """
    user = await gw.select("users", user_id)
    if user is None:
        raise UserNotFound()
    if acting_user_id is not None and str(acting_user_id) == str(user.id):
        raise ValidationError("Нельзя удалить собственную учётную запись", code="CANNOT_DELETE_SELF")

    async with gw.atomic():
        role = await role_of(gw, user.id)
        if role == ROLE_CADET:
            await _delete_cadet_profile(gw, user.id)
        elif role == ROLE_INSTRUCTOR:
            await _delete_instructor_profile(gw, user.id)

        for edge in USER_RELATIONS:
            await gw.unrelate(edge, source=user.id)
        await gw.delete("users", user.id)

    logger.info("[delete] user=%s role=%s", user.id, role)


async def delete_plan(gw: GraphGateway, plan_id: Any) -> None:
    """
    Delete a payment plan unless some PlanHistory snapshot still refers to it.

    Raises:
        PlanNotFound: no such plan
        PlanInUse: referenced by snapshots (``dependenciesCount`` is reported)
    """
    plan = await gw.select("plan", plan_id)
    if plan is None:
        raise PlanNotFound()

    dependents = await gw.sources("related_plan", plan.id)
    if dependents:
        logger.warning("[delete] plan=%s blocked by %d plan_history records", plan.id, len(dependents))
        raise PlanInUse(dependenciesCount=len(dependents))

    await gw.delete("plan", plan.id)
    logger.info("[delete] plan=%s", plan.id)
