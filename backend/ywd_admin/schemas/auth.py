# ywd_admin/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for login and the current session.
"""
from pydantic import BaseModel


class LoginRequest(BaseModel):
    """
    Request model for the login endpoint.
    The phone may be in any format; it is normalized before lookup.
    """
    phone: str = ""
    password: str = ""


class SessionUser(BaseModel):
    """
    User summary carried by the session token and returned to the client.
    """
    id: str  # User unique identifier
    phone: str  # Normalized phone number
    name: str  # "<name> <surname>"
    role: str | None = None  # "admin" | "instructor" | "cadet"


class LoginResponse(BaseModel):
    user: SessionUser
    message: str


class MeResponse(BaseModel):
    user: SessionUser
