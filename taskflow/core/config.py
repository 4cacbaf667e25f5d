from os import getenv


def _flag(name: str, default: str) -> bool:
    return getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://taskflow:taskflow@db:5432/taskflow")
    DB_TIMEOUT_SECONDS = int(getenv("DB_TIMEOUT_SECONDS", "10"))

    SESSION_COOKIE_NAME = getenv("SESSION_COOKIE_NAME", "taskflow_session")
    SESSION_TTL_HOURS = int(getenv("SESSION_TTL_HOURS", "24"))  # fixed, never renewed
    SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE", "true")
    SESSION_COOKIE_SAMESITE = getenv("SESSION_COOKIE_SAMESITE", "none")
    SESSION_COOKIE_DOMAIN = getenv("SESSION_COOKIE_DOMAIN") or None

    BCRYPT_ROUNDS = int(getenv("BCRYPT_ROUNDS", "10"))
    MIN_PASSWORD_LENGTH = int(getenv("MIN_PASSWORD_LENGTH", "6"))

    CORS_ORIGINS = [o.strip() for o in getenv("CORS_ORIGINS", "").split(",") if o.strip()]
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
    PORT = int(getenv("PORT", "3000"))


settings = Settings()
