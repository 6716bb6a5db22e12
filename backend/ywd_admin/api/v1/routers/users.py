# ywd_admin/api/v1/routers/users.py
from fastapi import APIRouter, Depends, Query, status

from ywd_admin.api.v1.deps import get_gateway, require_admin
from ywd_admin.core.gateway import GraphGateway, parse_ref
from ywd_admin.models import User
from ywd_admin.schemas.users import UserCreateIn, UserOut, UserUpdateIn
from ywd_admin.services import delete_user, list_users, provision_user, update_user
from ywd_admin.services.lookups import role_of, user_summary

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut], dependencies=[Depends(require_admin)])
async def get_users(
    q: str | None = Query(default=None, description="Search by full name or phone"),
    role: str | None = Query(default=None, description="Role code: admin / instructor / cadet"),
    gw: GraphGateway = Depends(get_gateway),
):
    """
    List users with their resolved role (admin only).

    Args:
        q: Optional case-insensitive substring of "name surname patronymic" or phone
        role: Optional role code filter

    Returns:
        list[UserOut]: Users ordered by surname, then name
    """
    return await list_users(gw, q=q, role=role)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_user(body: UserCreateIn, gw: GraphGateway = Depends(get_gateway)):
    """
    Provision a user: user node, role relation and, for cadets and
    instructors, the role profile.

    Returns:
        dict: {"user": UserOut, "message": ...}

    Raises:
        ValidationError (400): If a required field is missing
        PhoneTaken (409): If the phone already belongs to a user (PHONE_EXISTS)
        RoleNotFound (404): If the role code is unknown (ROLE_NOT_FOUND)
    """
    user = await provision_user(
        gw,
        name=body.firstName.strip(),
        surname=body.lastName.strip(),
        patronymic=(body.patronymic or "").strip() or None,
        phone=body.phone,
        password=body.password,
        role=body.role,
    )
    return {"user": user_summary(user, body.role), "message": "Пользователь успешно создан"}


@router.put("/{user_id}", dependencies=[Depends(require_admin)])
async def edit_user(user_id: str, body: UserUpdateIn, gw: GraphGateway = Depends(get_gateway)):
    """
    Edit a user's identity fields. The role can't be changed.

    Raises:
        UserNotFound (404): If the user does not exist (USER_NOT_FOUND)
        PhoneTaken (409): If the new phone belongs to someone else
    """
    user = await update_user(
        gw,
        parse_ref(user_id, "users"),
        name=(body.firstName or "").strip() or None,
        surname=(body.lastName or "").strip() or None,
        patronymic=body.patronymic.strip() if body.patronymic is not None else None,
        phone=body.phone,
        password=body.password,
    )
    return {
        "user": user_summary(user, await role_of(gw, user.id)),
        "message": "Данные пользователя обновлены",
    }


@router.delete("/{user_id}")
async def remove_user(
    user_id: str,
    admin: User = Depends(require_admin),
    gw: GraphGateway = Depends(get_gateway),
):
    """
    Delete a user together with its role profile and dependent records.

    Raises:
        UserNotFound (404): If the user does not exist
        ValidationError (400): If the admin tries to delete themself (CANNOT_DELETE_SELF)
    """
    await delete_user(gw, parse_ref(user_id, "users"), acting_user_id=admin.id)
    return {"message": "Пользователь успешно удален"}
