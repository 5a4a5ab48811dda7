import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dental_clinic.db")
DATABASE_ECHO = _get_bool(os.getenv("DATABASE_ECHO"), default=False)

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:5173"])

# Access tokens are minted by the hosted auth provider; we only verify them.
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

SLOT_INTERVAL_MINUTES = int(os.getenv("SLOT_INTERVAL_MINUTES", "30"))
DEFAULT_APPOINTMENT_DURATION_MINUTES = int(os.getenv("DEFAULT_APPOINTMENT_DURATION_MINUTES", "30"))
MAX_LOOKAHEAD_DAYS = int(os.getenv("MAX_LOOKAHEAD_DAYS", "90"))
RESOLVER_MAX_WORKERS = int(os.getenv("RESOLVER_MAX_WORKERS", "8"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and AUTH_JWT_SECRET == "change-me":
        raise RuntimeError("AUTH_JWT_SECRET must be set in production.")
    if SLOT_INTERVAL_MINUTES <= 0 or 60 % SLOT_INTERVAL_MINUTES != 0:
        raise RuntimeError("SLOT_INTERVAL_MINUTES must evenly divide an hour.")
    if MAX_LOOKAHEAD_DAYS < 0:
        raise RuntimeError("MAX_LOOKAHEAD_DAYS cannot be negative.")
