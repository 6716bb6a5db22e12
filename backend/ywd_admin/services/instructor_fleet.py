# ywd_admin/services/instructor_fleet.py
"""
Instructor fleet reconciliation.

Saving an instructor's cars replaces the whole ``has_car`` set: every
existing relation is dropped, then each submitted car is looked up by plate
(creating it when unknown, refreshing model/color when known) and linked
again. Car nodes are keyed by plate and shared, never duplicated.
"""
import logging
import re
from typing import Any, Iterable, Mapping

from ywd_admin.core.errors import ValidationError
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.services.lookups import instructor_profile_id

logger = logging.getLogger("uvicorn.error")

# Russian registration plate, e.g. А123ВС77 / A123BC777RUS
PLATE_PATTERN = re.compile(r"^[А-ЯA-Z]\d{1,3}[А-ЯA-Z]{2}\d{2,3}(RUS)?$", re.IGNORECASE)


def normalize_plate(plate: str) -> str:
    return re.sub(r"\s+", "", plate or "").upper()


def car_to_dict(car) -> dict:
    return {
        "id": str(car.id),
        "model": car.model,
        "plateNumber": car.car_number,
        "color": car.color,
    }


def prepare_cars(cars: Iterable[Mapping[str, Any]]) -> list[dict]:
    """
    Validate and normalize submitted cars. Plates are upper-cased; repeated
    plates collapse into the last occurrence.
    """
    prepared: dict[str, dict] = {}
    for car in cars:
        plate = normalize_plate(car.get("plateNumber", ""))
        model = (car.get("model") or "").strip()
        color = (car.get("color") or "").strip()
        if not plate or not model or not color:
            raise ValidationError("Модель, номер и цвет автомобиля обязательны")
        if not PLATE_PATTERN.match(plate):
            raise ValidationError(f"Некорректный формат номера: {plate}", code="INVALID_PLATE")
        prepared.pop(plate, None)
        prepared[plate] = {"plateNumber": plate, "model": model, "color": color}
    return list(prepared.values())


async def get_instructor_cars(gw: GraphGateway, user_id: Any) -> list[dict]:
    instructor_id = await instructor_profile_id(gw, user_id)
    car_ids = await gw.targets("has_car", instructor_id)
    if not car_ids:
        return []
    cars = {c.id: c for c in await gw.find("cars", id__in=car_ids)}
    return [car_to_dict(cars[cid]) for cid in car_ids if cid in cars]


async def configure_instructor_cars(gw: GraphGateway, user_id: Any, cars: Iterable[Mapping[str, Any]]) -> list[str]:
    """
    Replace the instructor's fleet with ``cars``.

    Returns the ids of the cars now linked, in submission order.
    Raises InstructorNotFound when ``user_id`` has no instructor profile.
    """
    submitted = prepare_cars(cars)
    instructor_id = await instructor_profile_id(gw, user_id)

    linked: list[str] = []
    async with gw.atomic():
        removed = await gw.unrelate("has_car", source=instructor_id)

        for data in submitted:
            car = await gw.find_one("cars", car_number=data["plateNumber"])
            if car is None:
                car = await gw.create(
                    "cars",
                    {"model": data["model"], "car_number": data["plateNumber"], "color": data["color"]},
                )
            else:
                car = await gw.merge("cars", car.id, {"model": data["model"], "color": data["color"]})

            if car is None or car.id is None:
                logger.warning("[fleet] no usable car record for plate %s, skipped", data["plateNumber"])
                continue

            await gw.relate("has_car", instructor_id, car.id)
            linked.append(str(car.id))

    logger.info(
        "[fleet] instructor=%s unlinked=%d linked=%d",
        instructor_id, removed, len(linked),
    )
    return linked
