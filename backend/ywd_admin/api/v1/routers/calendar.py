# ywd_admin/api/v1/routers/calendar.py
from fastapi import APIRouter, Depends, Query

from ywd_admin.api.v1.deps import get_gateway, require_admin
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.services import bucket_by_day, list_events

router = APIRouter(prefix="/calendar", tags=["calendar"], dependencies=[Depends(require_admin)])


@router.get("/events")
async def get_events(
    year: int | None = Query(default=None),
    month: int | None = Query(default=None, description="1-12"),
    gw: GraphGateway = Depends(get_gateway),
):
    """
    Lessons and exams ordered by date, optionally restricted to one month.

    Raises:
        ValidationError (400): If only one of year/month is given, or month is out of range
    """
    return await list_events(gw, year=year, month=month)


@router.get("/days")
async def get_days(
    year: int = Query(...),
    month: int = Query(..., description="1-12"),
    gw: GraphGateway = Depends(get_gateway),
):
    """Events of one month grouped by calendar day: {"YYYY-MM-DD": [event, ...]}."""
    return bucket_by_day(await list_events(gw, year=year, month=month))
