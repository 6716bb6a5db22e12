# ywd_admin/api/v1/routers/cadets.py
from fastapi import APIRouter, Depends

from ywd_admin.api.v1.deps import get_gateway, require_admin
from ywd_admin.core.gateway import GraphGateway, parse_ref
from ywd_admin.schemas.config import CadetConfigIn, CadetConfigOut
from ywd_admin.services import configure_cadet, get_cadet_config

router = APIRouter(prefix="/cadets", tags=["cadets"], dependencies=[Depends(require_admin)])


@router.get("/{user_id}/config", response_model=CadetConfigOut)
async def read_config(user_id: str, gw: GraphGateway = Depends(get_gateway)):
    """
    Current configuration of a cadet (latest PlanHistory snapshot).
    A cadet that was never configured gets the empty default.

    Raises:
        CadetNotFound (404): If the user is unknown or is not a cadet
    """
    return await get_cadet_config(gw, parse_ref(user_id, "users"))


@router.post("/{user_id}/config")
async def write_config(user_id: str, body: CadetConfigIn, gw: GraphGateway = Depends(get_gateway)):
    """
    Save a new configuration snapshot for a cadet.

    Returns:
        dict: {"config": CadetConfigOut, "message": ...}

    Raises:
        ValidationError (400): If the plan or instructor is not chosen
        CadetNotFound / InstructorNotFound / PlanNotFound (404)
    """
    ref = parse_ref(user_id, "users")
    await configure_cadet(
        gw,
        ref,
        payment_plan=body.paymentPlan,
        instructor_id=body.instructorId,
        is_automatic=body.isAutomatic,
        spent_hours=body.spentHours,
        bonus_hours=body.bonusHours,
    )
    return {"config": await get_cadet_config(gw, ref), "message": "Конфигурация курсанта сохранена"}
