# ywd_admin/core/security.py
"""
Security module for authentication.
Handles password hashing, session token creation/validation and the
session cookie.
"""
import datetime as dt

import jwt  # PyJWT
from fastapi import Response
from passlib.context import CryptContext

from ywd_admin.config import settings

# Password hashing context
# Argon2 only; hashes are stored in users.password_hash
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

# Session token configuration
JWT_SECRET = settings.jwt_secret
SESSION_TTL_DAYS = settings.session_ttl_days
JWT_ALG = "HS256"  # HMAC SHA-256
SESSION_COOKIE = settings.session_cookie_name


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a stored hash.
    Malformed or foreign hashes count as a mismatch.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def create_session_token(user_id: str, phone: str, name: str, role: str) -> str:
    """
    Create the signed session token stored in the session cookie.

    The payload carries everything ``/auth/me`` reports, so reading the
    current session needs no database round trip:
        - sub: user id
        - phone, name ("<name> <surname>"), role
        - iat / exp: issue and expiry timestamps (SESSION_TTL_DAYS)
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "phone": phone,
        "name": name,
        "role": role,
        "iat": now,
        "exp": now + dt.timedelta(days=SESSION_TTL_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_session_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        SESSION_COOKIE,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )
