# ywd_admin/services/calendar.py
"""Calendar projection of lessons and exams, with per-day bucketing."""
import datetime as dt
from collections import OrderedDict

from ywd_admin.core.errors import ValidationError
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.services.chats import as_utc, iso


def month_bounds(year: int, month: int) -> tuple[dt.datetime, dt.datetime]:
    """[first day of month, first day of next month) in UTC."""
    if not 1 <= month <= 12:
        raise ValidationError("Месяц должен быть от 1 до 12", code="INVALID_MONTH")
    if not 1 <= year <= 9998:
        raise ValidationError("Некорректный год", code="INVALID_YEAR")
    start = dt.datetime(year, month, 1, tzinfo=dt.timezone.utc)
    end = dt.datetime(year + (month == 12), month % 12 + 1, 1, tzinfo=dt.timezone.utc)
    return start, end


def _person(user) -> dict | None:
    if user is None:
        return None
    return {"id": str(user.id), "name": user.name, "surname": user.surname, "patronymic": user.patronymic}


async def list_events(gw: GraphGateway, year: int | None = None, month: int | None = None) -> list[dict]:
    """
    Events ordered by date, each with its type and the cadet/instructor
    users behind the linked profiles. ``year`` and ``month`` (1-12) restrict
    the result to one month and must be given together.
    """
    if (year is None) != (month is None):
        raise ValidationError("Необходимо указать и год, и месяц", code="INVALID_PERIOD")

    filters = {}
    if year is not None:
        start, end = month_bounds(year, month)
        filters = {"date_time__gte": start, "date_time__lt": end}
    events = await gw.find("event", order_by=("date_time",), **filters)
    if not events:
        return []
    event_ids = [e.id for e in events]

    event_type = dict(await gw.edges("of_type", source_id__in=event_ids))
    event_cadet = dict(await gw.edges("event_of_cadet", source_id__in=event_ids))
    event_instructor = dict(await gw.edges("event_of_instructor", source_id__in=event_ids))

    types = {t.id: t for t in await gw.find("event_types")}
    cadet_user = {target: source for source, target in await gw.edges("is_cadet")}
    instructor_user = {target: source for source, target in await gw.edges("is_instructor")}
    users = {u.id: u for u in await gw.find("users")}

    items = []
    for event in events:
        etype = types.get(event_type.get(event.id))
        items.append({
            "id": str(event.id),
            "date": iso(event.date_time),
            "eventType": {"id": str(etype.id), "code": etype.code, "name": etype.name} if etype else None,
            "cadet": _person(users.get(cadet_user.get(event_cadet.get(event.id)))),
            "instructor": _person(users.get(instructor_user.get(event_instructor.get(event.id)))),
        })
    return items


def bucket_by_day(events: list[dict]) -> "OrderedDict[str, list[dict]]":
    """Group serialized events by their UTC calendar day, days ascending."""
    buckets: dict[str, list[dict]] = {}
    for event in events:
        if not event.get("date"):
            continue
        day = as_utc(dt.datetime.fromisoformat(event["date"].replace("Z", "+00:00"))).date().isoformat()
        buckets.setdefault(day, []).append(event)
    return OrderedDict(sorted(buckets.items()))
