# ywd_admin/api/v1/routers/auth.py
import logging

import jwt
from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse

from ywd_admin.api.v1.deps import get_gateway, read_session_token
from ywd_admin.core.errors import AuthError, ValidationError
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.core.phone import normalize_phone
from ywd_admin.core.security import (
    clear_session_cookie,
    create_session_token,
    decode_session_token,
    set_session_cookie,
    verify_password,
)
from ywd_admin.schemas.auth import LoginRequest
from ywd_admin.services.lookups import role_of

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(payload: LoginRequest, response: Response, gw: GraphGateway = Depends(get_gateway)):
    """
    Authenticate by phone and password and open a session.

    The phone is normalized before lookup, so "8 (999) 123-45-67" and
    "+79991234567" name the same account. Any role may log in; the admin
    panel decides what a non-admin gets to see.

    Args:
        payload: Request body containing phone and password
        response: FastAPI Response object (for setting the session cookie)

    Returns:
        dict: Response containing:
            - user: {id, phone, name, role}
            - accessToken: the session token (also set as the "auth-token" cookie)
            - message: localized greeting

    Raises:
        ValidationError (400): If phone or password is missing
        AuthError (401): If credentials are invalid (AUTH_INVALID_CREDENTIALS)
    """
    if not payload.phone or not payload.password:
        raise ValidationError("Введите номер телефона и пароль")

    user = await gw.find_one("users", phone=normalize_phone(payload.phone))
    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthError("Неверный номер телефона или пароль", code="AUTH_INVALID_CREDENTIALS")

    role = await role_of(gw, user.id)
    summary = {"id": str(user.id), "phone": user.phone, "name": user.full_name, "role": role}
    token = create_session_token(summary["id"], summary["phone"], summary["name"], role)
    set_session_cookie(response, token)
    logger.info("[auth] login user=%s role=%s", user.id, role)
    return {"user": summary, "accessToken": token, "message": "Вход выполнен успешно"}


@router.post("/logout")
async def logout(response: Response):
    """
    Close the session by clearing the "auth-token" cookie.

    Always succeeds, even without a cookie. The token itself stays valid
    until it expires.
    """
    clear_session_cookie(response)
    return {"message": "Выход выполнен успешно"}


@router.get("/me")
async def me(request: Request, authorization: str | None = Header(default=None)):
    """
    Get the current session's user summary straight from the token.

    Returns:
        dict: {"user": {id, phone, name, role}}

    Raises:
        AuthError (401): If the token is missing, invalid or expired. An
            invalid cookie is cleared in the same response.
    """
    token = read_session_token(request, authorization)
    if not token:
        raise AuthError()
    try:
        session = decode_session_token(token)
    except jwt.InvalidTokenError:
        err = AuthError("Сессия недействительна или истекла", code="AUTH_INVALID_TOKEN")
        resp = JSONResponse(err.to_payload(), status_code=err.status_code)
        clear_session_cookie(resp)
        return resp
    return {
        "user": {
            "id": session.get("sub"),
            "phone": session.get("phone"),
            "name": session.get("name"),
            "role": session.get("role"),
        }
    }
