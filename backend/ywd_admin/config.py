# ywd_admin/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "YouWillDrive Admin API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for the admin frontend
    CORS_ORIGINS: list[str] = _split_csv(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        )
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")

    # Session settings
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    session_ttl_days: int = int(os.getenv("SESSION_TTL_DAYS", "7"))
    session_cookie_name: str = "auth-token"

    # Users get a synthetic email "<phone>@<domain>"
    email_domain: str = os.getenv("EMAIL_DOMAIN", "youwilldrive.alt")

    # Default admin bootstrap (skipped unless phone and password are both set)
    admin_phone: str | None = os.getenv("ADMIN_PHONE")
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")
    admin_name: str = os.getenv("ADMIN_NAME", "Администратор")
    admin_surname: str = os.getenv("ADMIN_SURNAME", "Системный")

    @property
    def secure_cookies(self) -> bool:
        return self.env == "prod"


settings = Settings()  # Instantiate configuration
