import pytest

from ywd_admin.core.errors import CadetNotFound, InstructorNotFound, PlanNotFound, ValidationError
from ywd_admin.models import PlanHistory
from ywd_admin.services import configure_cadet, get_cadet_config, list_assigned_cadets
from ywd_admin.services.cadet_config import default_config


pytestmark = pytest.mark.asyncio


async def test_unconfigured_cadet_gets_default(gateway, create_user):
    cadet, _ = await create_user(role="cadet")
    assert await get_cadet_config(gateway, cadet.id) == {
        "paymentPlan": "",
        "instructorId": "",
        "isAutomatic": False,
        "spentHours": 0,
        "bonusHours": 0,
    }
    assert default_config() == await get_cadet_config(gateway, str(cadet.id))


async def test_latest_snapshot_wins(gateway, create_user, make_plan):
    cadet, _ = await create_user(role="cadet")
    first_instructor, _ = await create_user(role="instructor")
    second_instructor, _ = await create_user(role="instructor")
    basic = await make_plan(name="Базовый")
    premium = await make_plan(name="Премиум", practice_hours=80, price=70000)

    await configure_cadet(
        gateway, cadet.id,
        payment_plan=basic["id"], instructor_id=str(first_instructor.id),
        is_automatic=False, spent_hours=2, bonus_hours=1,
    )
    config = await get_cadet_config(gateway, cadet.id)
    assert config["paymentPlan"] == basic["id"]
    assert config["instructorId"] == str(first_instructor.id)
    assert config["bonusHours"] == 1

    await configure_cadet(
        gateway, cadet.id,
        payment_plan=f"plan:{premium['id']}", instructor_id=f"users:{second_instructor.id}",
        is_automatic=True, spent_hours="10", bonus_hours="4",
    )
    config = await get_cadet_config(gateway, cadet.id)
    assert config == {
        "paymentPlan": premium["id"],
        "instructorId": str(second_instructor.id),
        "isAutomatic": True,
        "spentHours": 10,
        "bonusHours": 4,
    }
    assert await PlanHistory.all().count() == 2


async def test_spent_hours_overwrite_and_lenient_numbers(gateway, create_user, make_plan):
    cadet, _ = await create_user(role="cadet")
    instructor, _ = await create_user(role="instructor")
    plan = await make_plan()

    await configure_cadet(gateway, cadet.id, payment_plan=plan["id"], instructor_id=str(instructor.id), spent_hours=20)
    await configure_cadet(
        gateway, cadet.id, payment_plan=plan["id"], instructor_id=str(instructor.id),
        spent_hours="много", bonus_hours=None,
    )
    config = await get_cadet_config(gateway, cadet.id)
    assert config["spentHours"] == 0
    assert config["bonusHours"] == 0


async def test_configure_requires_plan_and_instructor(gateway, create_user):
    cadet, _ = await create_user(role="cadet")
    with pytest.raises(ValidationError):
        await configure_cadet(gateway, cadet.id, payment_plan="", instructor_id="x")


async def test_configure_dangling_references(gateway, create_user, make_plan):
    cadet, _ = await create_user(role="cadet")
    admin, _ = await create_user(role="admin")
    instructor, _ = await create_user(role="instructor")
    plan = await make_plan()

    with pytest.raises(CadetNotFound):
        await configure_cadet(gateway, instructor.id, payment_plan=plan["id"], instructor_id=str(instructor.id))
    with pytest.raises(InstructorNotFound):
        await configure_cadet(gateway, cadet.id, payment_plan=plan["id"], instructor_id=str(admin.id))
    with pytest.raises(PlanNotFound):
        await configure_cadet(
            gateway, cadet.id,
            payment_plan="00000000-0000-0000-0000-000000000000", instructor_id=str(instructor.id),
        )
    assert await PlanHistory.all().count() == 0


async def test_non_cadet_config_is_not_found(gateway, create_user):
    admin, _ = await create_user(role="admin")
    with pytest.raises(CadetNotFound):
        await get_cadet_config(gateway, admin.id)


async def test_assigned_cadets_follow_latest_snapshot(gateway, create_user, make_plan):
    cadet_a, _ = await create_user(role="cadet", surname="Андреев")
    cadet_b, _ = await create_user(role="cadet", surname="Борисов")
    first, _ = await create_user(role="instructor")
    second, _ = await create_user(role="instructor")
    plan = await make_plan()

    await configure_cadet(gateway, cadet_a.id, payment_plan=plan["id"], instructor_id=str(first.id), spent_hours=5)
    await configure_cadet(gateway, cadet_b.id, payment_plan=plan["id"], instructor_id=str(first.id))
    # cadet_b moves to the second instructor
    await configure_cadet(gateway, cadet_b.id, payment_plan=plan["id"], instructor_id=str(second.id))

    assigned = await list_assigned_cadets(gateway, first.id)
    assert [c["surname"] for c in assigned] == ["Андреев"]
    assert assigned[0]["spentHours"] == 5
    assert [c["surname"] for c in await list_assigned_cadets(gateway, second.id)] == ["Борисов"]


async def test_fractional_hours_are_kept(gateway, create_user, make_plan):
    cadet, _ = await create_user(role="cadet")
    instructor, _ = await create_user(role="instructor")
    plan = await make_plan()
    await configure_cadet(
        gateway, cadet.id,
        payment_plan=plan["id"], instructor_id=str(instructor.id),
        is_automatic=False, spent_hours="12,5", bonus_hours=1.5,
    )
    config = await get_cadet_config(gateway, cadet.id)
    assert config["spentHours"] == 12.5
    assert config["bonusHours"] == 1.5
