# ywd_admin/api/v1/routers/plans.py
from fastapi import APIRouter, Depends, status

from ywd_admin.api.v1.deps import get_gateway, require_admin
from ywd_admin.core.gateway import GraphGateway, parse_ref
from ywd_admin.schemas.plans import PlanIn, PlanOut, TransmissionOut
from ywd_admin.services import (
    create_plan,
    delete_plan,
    get_plan,
    list_plans,
    list_transmissions,
    update_plan,
)

router = APIRouter(tags=["plans"], dependencies=[Depends(require_admin)])


@router.get("/plans", response_model=list[PlanOut])
async def get_plans(gw: GraphGateway = Depends(get_gateway)):
    return await list_plans(gw)


@router.post("/plans", status_code=status.HTTP_201_CREATED)
async def add_plan(body: PlanIn, gw: GraphGateway = Depends(get_gateway)):
    """
    Create a payment plan.

    Raises:
        ValidationError (400): If name, practice_hours or price is missing or invalid
    """
    plan = await create_plan(
        gw,
        name=(body.name or "").strip() or None,
        practice_hours=body.practice_hours,
        theory_hours=body.theory_hours or 0,
        price=body.price,
    )
    return {"plan": plan, "message": "План оплаты создан"}


@router.get("/plans/{plan_id}", response_model=PlanOut)
async def read_plan(plan_id: str, gw: GraphGateway = Depends(get_gateway)):
    return await get_plan(gw, parse_ref(plan_id, "plan"))


@router.put("/plans/{plan_id}")
async def edit_plan(plan_id: str, body: PlanIn, gw: GraphGateway = Depends(get_gateway)):
    """Partial update: omitted fields keep their values. 404 if the plan is absent."""
    plan = await update_plan(gw, parse_ref(plan_id, "plan"), body.model_dump(exclude_unset=True))
    return {"plan": plan, "message": "План оплаты обновлен"}


@router.delete("/plans/{plan_id}")
async def remove_plan(plan_id: str, gw: GraphGateway = Depends(get_gateway)):
    """
    Delete a payment plan.

    Raises:
        PlanNotFound (404): If the plan does not exist
        PlanInUse (409): If cadet configurations still refer to it;
            the payload carries ``dependenciesCount``
    """
    await delete_plan(gw, parse_ref(plan_id, "plan"))
    return {"message": "План оплаты удален"}


@router.get("/transmissions", response_model=list[TransmissionOut])
async def get_transmissions(gw: GraphGateway = Depends(get_gateway)):
    return await list_transmissions(gw)
