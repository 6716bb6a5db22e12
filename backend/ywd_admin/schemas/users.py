# ywd_admin/schemas/users.py
"""
Pydantic schemas for user management endpoints.
Field names follow the admin frontend (camelCase input, snake_case nodes).
"""
from pydantic import BaseModel


class UserOut(BaseModel):
    """User row as listed in the admin panel."""
    id: str
    name: str
    surname: str
    patronymic: str | None = None
    phone: str
    role: str | None = None


class UserCreateIn(BaseModel):
    """
    Request model for provisioning a user.
    Missing fields are reported by the workflow as a 400 with a localized message.
    """
    firstName: str = ""
    lastName: str = ""
    patronymic: str | None = None
    phone: str = ""
    password: str = ""
    role: str = ""  # "admin" | "instructor" | "cadet"


class UserUpdateIn(BaseModel):
    """
    Request model for editing identity fields.
    All fields are optional; an empty password keeps the current one.
    """
    firstName: str | None = None
    lastName: str | None = None
    patronymic: str | None = None
    phone: str | None = None
    password: str | None = None
