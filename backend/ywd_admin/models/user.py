# ywd_admin/models/user.py
"""
Database models for users and their roles.

Users are graph nodes; the role a user holds is expressed through the
``of_role`` relation (User -> Role) rather than a column, so the admin panel
shares the data layout of the mobile application.
"""
import uuid
from tortoise import fields, models


class User(models.Model):
    """
    User account node.

    Identity is the normalized phone number (unique). The email is derived
    from the phone at provisioning time and the avatar starts empty.

    Relations (edge tables):
    - of_role: User -> Role (exactly one)
    - is_cadet / is_instructor: User -> role-specific profile (at most one)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    name = fields.CharField(max_length=128)
    surname = fields.CharField(max_length=128)
    patronymic = fields.CharField(max_length=128, null=True)
    phone = fields.CharField(max_length=32, unique=True, index=True)  # Normalized "+7XXXXXXXXXX"
    password_hash = fields.CharField(max_length=255)  # argon2 hash, never the plain password
    email = fields.CharField(max_length=256)
    avatar = fields.CharField(max_length=1024, default="")
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"


class Role(models.Model):
    """
    Static reference data: admin / instructor / cadet.
    ``code`` is the stable key used by the API and stored in session tokens.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    code = fields.CharField(max_length=32, unique=True)  # "admin" | "instructor" | "cadet"
    name = fields.CharField(max_length=64)  # Display name (ru)

    class Meta:
        table = "roles"


class OfRole(models.Model):
    """Relation User -> Role."""
    id = fields.IntField(pk=True)
    source: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="of_role_out", on_delete=fields.CASCADE
    )
    target: fields.ForeignKeyRelation[Role] = fields.ForeignKeyField(
        "models.Role", related_name="of_role_in", on_delete=fields.CASCADE
    )

    class Meta:
        table = "of_role"
