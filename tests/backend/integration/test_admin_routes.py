import datetime as dt
import logging

import pytest
from tortoise.exceptions import OperationalError

from ywd_admin.api.v1.routers import plans as plans_router
from ywd_admin.core.errors import QueryError
from ywd_admin.models import BelongsTo, Chat, Message, Participates, SentBy


pytestmark = pytest.mark.asyncio


async def _create(client, headers, **fields):
    payload = {
        "firstName": "Пётр",
        "lastName": "Петров",
        "phone": "89990000000",
        "password": "secret1",
        "role": "cadet",
    }
    payload.update(fields)
    return await client.post("/api/users", headers=headers, json=payload)


async def test_cadet_configuration_end_to_end(client, admin_headers):
    # Provision the cadet and an instructor
    resp = await _create(client, admin_headers, firstName="Иван", lastName="Иванов", phone="89991234567")
    assert resp.status_code == 201, resp.text
    cadet = resp.json()["user"]
    assert cadet["phone"] == "+79991234567"
    assert cadet["role"] == "cadet"

    resp = await _create(client, admin_headers, firstName="Олег", lastName="Рулев", phone="89995550000", role="instructor")
    instructor = resp.json()["user"]

    resp = await client.post(
        "/api/plans", headers=admin_headers, json={"name": "Стандарт", "practice_hours": 56, "price": 45000}
    )
    assert resp.status_code == 201
    plan = resp.json()["plan"]

    resp = await client.get(f"/api/cadets/{cadet['id']}/config", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "paymentPlan": "",
        "instructorId": "",
        "isAutomatic": False,
        "spentHours": 0,
        "bonusHours": 0,
    }

    resp = await client.post(
        f"/api/cadets/{cadet['id']}/config",
        headers=admin_headers,
        json={
            "paymentPlan": plan["id"],
            "instructorId": instructor["id"],
            "isAutomatic": True,
            "spentHours": 12,
            "bonusHours": 3,
        },
    )
    assert resp.status_code == 200, resp.text

    resp = await client.get(f"/api/cadets/{cadet['id']}/config", headers=admin_headers)
    assert resp.json() == {
        "paymentPlan": plan["id"],
        "instructorId": instructor["id"],
        "isAutomatic": True,
        "spentHours": 12,
        "bonusHours": 3,
    }

    resp = await client.get(f"/api/instructors/{instructor['id']}/cadets", headers=admin_headers)
    assert [c["id"] for c in resp.json()] == [cadet["id"]]

    # Plan is now referenced by the cadet's snapshot
    resp = await client.delete(f"/api/plans/{plan['id']}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["code"] == "PLAN_IN_USE"
    assert resp.json()["dependenciesCount"] == 1

    # Deleting the cadet removes the snapshot and frees the plan
    resp = await client.delete(f"/api/users/{cadet['id']}", headers=admin_headers)
    assert resp.status_code == 200
    resp = await client.delete(f"/api/plans/{plan['id']}", headers=admin_headers)
    assert resp.status_code == 200
    resp = await client.get(f"/api/plans/{plan['id']}", headers=admin_headers)
    assert resp.status_code == 404


async def test_user_management(client, admin_headers):
    resp = await _create(client, admin_headers, phone="89990001122")
    user_id = resp.json()["user"]["id"]

    dup = await _create(client, admin_headers, phone="+7 999 000 11 22")
    assert dup.status_code == 409
    assert dup.json()["code"] == "PHONE_EXISTS"

    missing = await _create(client, admin_headers, firstName="")
    assert missing.status_code == 400

    unknown_role = await _create(client, admin_headers, phone="89990001133", role="pilot")
    assert unknown_role.status_code == 404
    assert unknown_role.json()["code"] == "ROLE_NOT_FOUND"

    resp = await client.put(
        f"/api/users/{user_id}", headers=admin_headers, json={"lastName": "Сидоров", "patronymic": "Ильич"}
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["surname"] == "Сидоров"
    assert resp.json()["user"]["role"] == "cadet"

    resp = await client.get("/api/users", headers=admin_headers, params={"q": "сидор"})
    assert [u["id"] for u in resp.json()] == [user_id]
    resp = await client.get("/api/users", headers=admin_headers, params={"role": "admin"})
    assert len(resp.json()) == 1

    resp = await client.delete(f"/api/users/{user_id}", headers=admin_headers)
    assert resp.status_code == 200
    resp = await client.delete(f"/api/users/{user_id}", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "USER_NOT_FOUND"
    resp = await client.put("/api/users/not-an-id", headers=admin_headers, json={"firstName": "X"})
    assert resp.status_code == 404


async def test_admin_cannot_delete_self(client, admin_headers):
    me = (await client.get("/api/auth/me", headers=admin_headers)).json()["user"]
    resp = await client.delete(f"/api/users/{me['id']}", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "CANNOT_DELETE_SELF"


async def test_instructor_fleet_routes(client, admin_headers):
    resp = await _create(client, admin_headers, phone="89995550001", role="instructor")
    instructor_id = resp.json()["user"]["id"]

    resp = await client.get(f"/api/instructors/{instructor_id}/config", headers=admin_headers)
    assert resp.json() == {"cars": []}

    resp = await client.post(
        f"/api/instructors/{instructor_id}/config",
        headers=admin_headers,
        json={"cars": [
            {"model": "Kia Rio", "plateNumber": "а123вс77", "color": "Белый"},
            {"model": "Lada Vesta", "plateNumber": "B456CD777", "color": "Серый"},
        ]},
    )
    assert resp.status_code == 200, resp.text
    assert [c["plateNumber"] for c in resp.json()["cars"]] == ["А123ВС77", "B456CD777"]

    bad = await client.post(
        f"/api/instructors/{instructor_id}/config",
        headers=admin_headers,
        json={"cars": [{"model": "Kia", "plateNumber": "???", "color": "Белый"}]},
    )
    assert bad.status_code == 400
    assert bad.json()["code"] == "INVALID_PLATE"

    resp = await client.get("/api/instructors", headers=admin_headers)
    assert [i["id"] for i in resp.json()] == [instructor_id]

    resp = await _create(client, admin_headers, phone="89995550002")
    cadet_id = resp.json()["user"]["id"]
    resp = await client.get(f"/api/instructors/{cadet_id}/config", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "INSTRUCTOR_NOT_FOUND"


async def test_plan_routes(client, admin_headers):
    resp = await client.post("/api/plans", headers=admin_headers, json={"name": "Без цены", "practice_hours": 10})
    assert resp.status_code == 400

    resp = await client.post(
        "/api/plans", headers=admin_headers,
        json={"name": "Экспресс", "practice_hours": "30", "theory_hours": 20, "price": "30000.50"},
    )
    plan = resp.json()["plan"]
    assert plan["practice_hours"] == 30
    assert plan["price"] == 30000.5

    resp = await client.put(f"/api/plans/plan:{plan['id']}", headers=admin_headers, json={"price": 32000})
    assert resp.json()["plan"]["price"] == 32000
    assert resp.json()["plan"]["name"] == "Экспресс"

    resp = await client.get("/api/plans", headers=admin_headers)
    assert [p["name"] for p in resp.json()] == ["Экспресс"]

    resp = await client.get("/api/transmissions", headers=admin_headers)
    assert {t["name"] for t in resp.json()} == {"Механическая", "Автоматическая"}

    resp = await client.put(
        "/api/plans/00000000-0000-0000-0000-000000000000", headers=admin_headers, json={"name": "X"}
    )
    assert resp.status_code == 404


async def test_chat_and_calendar_routes(client, admin_headers, create_user):
    cadet, _ = await create_user(role="cadet", name="Иван", surname="Иванов")
    chat = await Chat.create()
    await Participates.create(source=chat, target=cadet)
    message = await Message.create(text="Привет", date_sent=dt.datetime.now(dt.timezone.utc))
    await BelongsTo.create(source=message, target=chat)
    await SentBy.create(source=message, target=cadet)

    resp = await client.get("/api/chats", headers=admin_headers, params={"period": "today"})
    assert resp.status_code == 200
    assert resp.json()[0]["cadetName"] == "Иван Иванов"

    resp = await client.get(f"/api/chats/{chat.id}", headers=admin_headers, params={"q": "прив"})
    assert resp.json()["messages"][0]["highlightedText"] == "<mark>Прив</mark>ет"

    resp = await client.get("/api/chats", headers=admin_headers, params={"period": "year"})
    assert resp.status_code == 400

    resp = await client.get("/api/calendar/events", headers=admin_headers, params={"year": 2024, "month": 5})
    assert resp.status_code == 200
    assert resp.json() == []
    resp = await client.get("/api/calendar/events", headers=admin_headers, params={"month": 5})
    assert resp.status_code == 400
    resp = await client.get("/api/calendar/days", headers=admin_headers, params={"year": 2024, "month": 13})
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_MONTH"


async def test_gateway_error_is_logged_with_traceback(client, admin_headers, monkeypatch, caplog):
    async def broken_list_plans(gw):
        try:
            raise OperationalError("no such table: plan")
        except OperationalError as e:
            raise QueryError() from e

    monkeypatch.setattr(plans_router, "list_plans", broken_list_plans)

    with caplog.at_level(logging.ERROR, logger="uvicorn.error"):
        resp = await client.get("/api/plans", headers=admin_headers)

    assert resp.status_code == 500
    assert resp.json()["code"] == "DB_QUERY_FAILED"
    record = next(r for r in caplog.records if "DB_QUERY_FAILED" in r.getMessage())
    assert record.exc_info is not None
    assert isinstance(record.exc_info[1].__cause__, OperationalError)
