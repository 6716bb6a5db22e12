import pytest

from ywd_admin.core.errors import PhoneTaken, RoleNotFound, UserNotFound, ValidationError
from ywd_admin.core.security import verify_password
from ywd_admin.models import Cadet, Instructor, IsCadet, IsInstructor, OfRole, User
from ywd_admin.services import list_users, provision_user, update_user
from ywd_admin.services.lookups import role_of


pytestmark = pytest.mark.asyncio


async def test_provision_cadet_creates_profile(gateway):
    user = await provision_user(
        gateway, name="Иван", surname="Иванов", phone="89991234567", password="secret1", role="cadet"
    )

    assert user.phone == "+79991234567"
    assert user.email == "+79991234567@youwilldrive.alt"
    assert verify_password("secret1", user.password_hash)
    assert await User.all().count() == 1
    assert await OfRole.filter(source_id=user.id).count() == 1
    assert await IsCadet.filter(source_id=user.id).count() == 1
    assert await Cadet.all().count() == 1
    assert (await Cadet.first()).hours_already == 0
    assert await role_of(gateway, user.id) == "cadet"


async def test_provision_instructor_creates_profile(gateway):
    user = await provision_user(
        gateway, name="Олег", surname="Рулев", phone="9995550000", password="pw", role="instructor"
    )
    assert await IsInstructor.filter(source_id=user.id).count() == 1
    assert await Instructor.all().count() == 1
    assert await Cadet.all().count() == 0


async def test_provision_admin_has_no_profile(gateway):
    await provision_user(gateway, name="Анна", surname="Админова", phone="89990000001", password="pw", role="admin")
    assert await Cadet.all().count() == 0
    assert await Instructor.all().count() == 0
    assert await OfRole.all().count() == 1


async def test_unknown_role_leaves_no_user(gateway):
    with pytest.raises(RoleNotFound):
        await provision_user(gateway, name="Икс", surname="Игрек", phone="89990000002", password="pw", role="pilot")
    assert await User.all().count() == 0


async def test_duplicate_phone_in_any_format(gateway):
    await provision_user(gateway, name="Иван", surname="Иванов", phone="89991234567", password="pw", role="cadet")
    with pytest.raises(PhoneTaken):
        await provision_user(
            gateway, name="Иван", surname="Другой", phone="+7 (999) 123-45-67", password="pw", role="cadet"
        )
    assert await User.all().count() == 1


async def test_missing_fields(gateway):
    with pytest.raises(ValidationError):
        await provision_user(gateway, name="", surname="Иванов", phone="89991234567", password="pw", role="cadet")


async def test_update_user_rederives_email_and_rehashes(gateway, create_user):
    user, _ = await create_user(role="cadet")
    updated = await update_user(gateway, user.id, phone="8 999 111 22 33", password="newpass", patronymic="Петрович")

    assert updated.phone == "+79991112233"
    assert updated.email == "+79991112233@youwilldrive.alt"
    assert updated.patronymic == "Петрович"
    assert verify_password("newpass", updated.password_hash)
    assert await role_of(gateway, user.id) == "cadet"


async def test_update_user_phone_conflict(gateway, create_user):
    first, _ = await create_user(phone="+79990000010")
    second, _ = await create_user(phone="+79990000011")
    with pytest.raises(PhoneTaken):
        await update_user(gateway, second.id, phone=first.phone)
    # Own phone is not a conflict
    await update_user(gateway, second.id, phone="89990000011")


async def test_update_unknown_user(gateway):
    with pytest.raises(UserNotFound):
        await update_user(gateway, "00000000-0000-0000-0000-000000000000", name="Никто")


async def test_list_users_filters(gateway, create_user):
    await create_user(role="cadet", name="Мария", surname="Светлова", phone="+79991110001")
    await create_user(role="instructor", name="Сергей", surname="Рулев", phone="+79991110002")

    everyone = await list_users(gateway)
    assert {u["role"] for u in everyone} == {"cadet", "instructor"}

    assert [u["surname"] for u in await list_users(gateway, role="instructor")] == ["Рулев"]
    assert [u["surname"] for u in await list_users(gateway, q="светл")] == ["Светлова"]
    assert [u["surname"] for u in await list_users(gateway, q="1110002")] == ["Рулев"]
    assert await list_users(gateway, q="мария", role="instructor") == []
