import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


load_dotenv()


def _get_list(value: str | None, default: str = "") -> list[str]:
    raw = default if value is None else value
    return [item.strip() for item in raw.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./lingo.db")

ALLOWED_ORIGINS = _get_list(os.getenv("ALLOWED_ORIGINS"), default="http://localhost:3000")

DEFAULT_JWT_SECRET_KEY = "dev-secret-change-me"
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET_KEY)
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))


@dataclass(frozen=True)
class TokenSettings:
    """Signing parameters shared by token issuance and verification."""

    secret_key: str
    algorithm: str = "HS256"
    expires_minutes: int = 60


@lru_cache
def get_token_settings() -> TokenSettings:
    return TokenSettings(
        secret_key=JWT_SECRET_KEY,
        algorithm=JWT_ALGORITHM,
        expires_minutes=JWT_EXPIRES_MINUTES,
    )


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
