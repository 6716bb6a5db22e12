# ywd_admin/core/reference.py
"""Static reference data shared with the mobile application."""

ROLE_ADMIN = "admin"
ROLE_INSTRUCTOR = "instructor"
ROLE_CADET = "cadet"

# code -> display name
ROLES = {
    ROLE_ADMIN: "Администратор",
    ROLE_INSTRUCTOR: "Инструктор",
    ROLE_CADET: "Курсант",
}

# Roles that own a profile node linked by "is_<role>"
PROFILE_ROLES = (ROLE_CADET, ROLE_INSTRUCTOR)

TRANSMISSION_MANUAL = "Механическая"
TRANSMISSION_AUTOMATIC = "Автоматическая"
TRANSMISSIONS = (TRANSMISSION_MANUAL, TRANSMISSION_AUTOMATIC)

EVENT_TYPES = {
    "lesson": "Занятие",
    "exam": "Экзамен",
}
