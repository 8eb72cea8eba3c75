import os



def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SQL_ECHO = _get_bool(os.getenv("SQL_ECHO"), default=False)
SQLITE_BUSY_TIMEOUT_SECONDS = int(os.getenv("SQLITE_BUSY_TIMEOUT_SECONDS", "30"))

CORS_ALLOWED_ORIGINS = _get_list(
    os.getenv("CORS_ALLOWED_ORIGINS"),
    default=["http://localhost:3000"],
)

MAX_APPOINTMENT_NOTES_LENGTH = int(os.getenv("MAX_APPOINTMENT_NOTES_LENGTH", "600"))
MAX_REVIEW_TEXT_LENGTH = int(os.getenv("MAX_REVIEW_TEXT_LENGTH", "2000"))

def validate_runtime_config(database_url: str | None = None) -> None:
    database_url = database_url if database_url is not None else os.getenv("DATABASE_URL", "")
    if not database_url:
        raise RuntimeError("DATABASE_URL must be set.")
    if APP_ENV.lower() == "production" and database_url.startswith("sqlite"):
        raise RuntimeError("A shared database is required in production; SQLite cannot serialize bookings across instances.")
