# ywd_admin/api/v1/routers/instructors.py
from fastapi import APIRouter, Depends

from ywd_admin.api.v1.deps import get_gateway, require_admin
from ywd_admin.core.gateway import GraphGateway, parse_ref
from ywd_admin.schemas.config import CarOut, InstructorConfigIn
from ywd_admin.schemas.users import UserOut
from ywd_admin.services import (
    configure_instructor_cars,
    get_instructor_cars,
    list_assigned_cadets,
    list_instructors,
)

router = APIRouter(prefix="/instructors", tags=["instructors"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[UserOut])
async def get_instructors(gw: GraphGateway = Depends(get_gateway)):
    """Users holding the instructor role (for the cadet configuration form)."""
    return await list_instructors(gw)


@router.get("/{user_id}/config")
async def read_config(user_id: str, gw: GraphGateway = Depends(get_gateway)):
    """
    The instructor's current fleet.

    Returns:
        dict: {"cars": [CarOut, ...]}

    Raises:
        InstructorNotFound (404): If the user has no instructor profile
    """
    cars = await get_instructor_cars(gw, parse_ref(user_id, "users"))
    return {"cars": [CarOut(**c) for c in cars]}


@router.post("/{user_id}/config")
async def write_config(user_id: str, body: InstructorConfigIn, gw: GraphGateway = Depends(get_gateway)):
    """
    Replace the instructor's fleet with the submitted cars.
    Cars are matched by plate number; known plates are updated, not duplicated.

    Raises:
        ValidationError (400): If a car is incomplete or a plate is malformed (INVALID_PLATE)
        InstructorNotFound (404): If the user has no instructor profile
    """
    ref = parse_ref(user_id, "users")
    await configure_instructor_cars(gw, ref, [car.model_dump() for car in body.cars])
    return {"cars": await get_instructor_cars(gw, ref), "message": "Конфигурация инструктора сохранена"}


@router.get("/{user_id}/cadets")
async def assigned_cadets(user_id: str, gw: GraphGateway = Depends(get_gateway)):
    """Cadets whose latest configuration names this instructor."""
    return await list_assigned_cadets(gw, parse_ref(user_id, "users"))
