import os
from typing import List


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"Missing required environment variable '{name}'. "
            "Set it in the service .env before starting the API."
        )
    return value


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# PUBLIC_INTERFACE
def database_url() -> str:
    """
    Build the DSN from the database env vars.

    Uses:
      - DATABASE_URL or POSTGRES_URL (full DSN; wins when provided)
      - POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_DB, POSTGRES_PORT, POSTGRES_HOST
    """
    url = os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL")
    if url:
        return url

    user = _required_env("POSTGRES_USER")
    password = _required_env("POSTGRES_PASSWORD")
    db = _required_env("POSTGRES_DB")
    port = os.getenv("POSTGRES_PORT", "5432")
    host = os.getenv("POSTGRES_HOST", "localhost")
    return f"postgresql://{user}:{password}@{host}:{port}/{db}"


def db_pool_min() -> int:
    return int(os.getenv("DB_POOL_MIN", "1"))


def db_pool_max() -> int:
    return int(os.getenv("DB_POOL_MAX", "10"))


def session_secret() -> str:
    # Signs session tokens; never defaulted.
    return _required_env("SESSION_SECRET")


def session_algorithm() -> str:
    return os.getenv("SESSION_ALGORITHM", "HS256")


def session_ttl_minutes() -> int:
    return int(os.getenv("SESSION_TTL_MINUTES", "1440"))  # default: 1 day


def session_cookie_name() -> str:
    return os.getenv("SESSION_COOKIE_NAME", "session")


def session_cookie_secure() -> bool:
    return _bool_env("SESSION_COOKIE_SECURE", False)


def cors_allow_origins() -> List[str]:
    value = os.getenv("CORS_ALLOW_ORIGINS")
    if not value:
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")


def log_format() -> str:
    return os.getenv("LOG_FORMAT", "json")
