# ywd_admin/api/v1/deps.py
import jwt
from fastapi import Depends, Header, Request

from ywd_admin.core.errors import AuthError, ForbiddenError
from ywd_admin.core.gateway import GraphGateway
from ywd_admin.core.reference import ROLE_ADMIN
from ywd_admin.core.security import SESSION_COOKIE, decode_session_token
from ywd_admin.models import User
from ywd_admin.services.lookups import role_of


async def get_gateway(request: Request) -> GraphGateway:
    """
    FastAPI dependency returning the process-wide GraphGateway.

    The gateway is created at startup and kept on ``app.state``; a lost
    connection is re-established here before the handler runs.

    Raises:
        TransportError (500): If the database can't be reached
    """
    gw: GraphGateway = request.app.state.gateway
    await gw.ensure_connected()
    return gw


def read_session_token(request: Request, authorization: str | None) -> str | None:
    """Bearer header first, then the HttpOnly session cookie."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        token = request.cookies.get(SESSION_COOKIE)
    return token or None


async def get_current_session(
    request: Request,
    authorization: str | None = Header(default=None),
) -> dict:
    """
    FastAPI dependency decoding the current session token.

    Returns:
        dict: Token payload (sub, phone, name, role, iat, exp)

    Raises:
        AuthError (401): If no token is provided (AUTH_REQUIRED)
        AuthError (401): If the token is invalid or expired (AUTH_INVALID_TOKEN)
    """
    token = read_session_token(request, authorization)
    if not token:
        raise AuthError()
    try:
        return decode_session_token(token)
    except jwt.InvalidTokenError:
        raise AuthError("Сессия недействительна или истекла", code="AUTH_INVALID_TOKEN") from None


async def require_admin(
    session: dict = Depends(get_current_session),
    gw: GraphGateway = Depends(get_gateway),
) -> User:
    """
    FastAPI dependency ensuring the caller is an administrator.

    The role stored in the token is not trusted: the user is re-read and its
    role re-resolved through ``of_role`` on every request, so deleted users
    and stale tokens lose access immediately.

    Returns:
        User: The authenticated admin user

    Raises:
        AuthError (401): If the token's user no longer exists (AUTH_USER_NOT_FOUND)
        ForbiddenError (403): If the user is not an admin (FORBIDDEN_ADMIN_ONLY)
    """
    user = await gw.select("users", session.get("sub"))
    if user is None:
        raise AuthError("Пользователь не найден", code="AUTH_USER_NOT_FOUND")
    if await role_of(gw, user.id) != ROLE_ADMIN:
        raise ForbiddenError()
    return user
