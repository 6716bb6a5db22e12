# ywd_admin/core/errors.py
"""
Application error taxonomy.

Every error carries an HTTP status, a stable machine code and a localized
message shown to the administrator. Handlers in ``ywd_admin.main`` render
them as ``{"error": message, "code": code, ...extra}``.
"""
from typing import Any


class AppError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Внутренняя ошибка сервера"

    def __init__(self, message: str | None = None, *, code: str | None = None, **extra: Any):
        self.message = message or self.message
        self.code = code or self.code
        self.extra = extra
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"error": self.message, "code": self.code, **self.extra}


# ---------- 400 ----------
class ValidationError(AppError):
    status_code = 400
    code = "BAD_REQUEST"
    message = "Некорректные данные запроса"


# ---------- 401 / 403 ----------
class AuthError(AppError):
    status_code = 401
    code = "AUTH_REQUIRED"
    message = "Не авторизован"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN_ADMIN_ONLY"
    message = "Доступ разрешён только администраторам"


# ---------- 404 ----------
class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Запись не найдена"


class UserNotFound(NotFoundError):
    code = "USER_NOT_FOUND"
    message = "Пользователь не найден"


class RoleNotFound(NotFoundError):
    code = "ROLE_NOT_FOUND"
    message = "Роль не найдена"


class CadetNotFound(NotFoundError):
    code = "CADET_NOT_FOUND"
    message = "Курсант не найден"


class InstructorNotFound(NotFoundError):
    code = "INSTRUCTOR_NOT_FOUND"
    message = "Инструктор не найден"


class TransmissionNotFound(NotFoundError):
    code = "TRANSMISSION_NOT_FOUND"
    message = "Тип трансмиссии не найден"


class PlanNotFound(NotFoundError):
    code = "PLAN_NOT_FOUND"
    message = "План оплаты не найден"


class ChatNotFound(NotFoundError):
    code = "CHAT_NOT_FOUND"
    message = "Чат не найден"


# ---------- 409 ----------
class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"
    message = "Конфликт данных"


class PhoneTaken(ConflictError):
    code = "PHONE_EXISTS"
    message = "Пользователь с таким номером телефона уже существует"


class PlanInUse(ConflictError):
    code = "PLAN_IN_USE"
    message = "Невозможно удалить план, так как он используется курсантами"


# ---------- 500 ----------
class GatewayError(AppError):
    status_code = 500
    code = "DB_ERROR"
    message = "Внутренняя ошибка сервера"


class TransportError(GatewayError):
    code = "DB_UNAVAILABLE"


class QueryError(GatewayError):
    code = "DB_QUERY_FAILED"
