import os
from dataclasses import dataclass, field, fields

from dotenv import load_dotenv

load_dotenv()


def _bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "y", "on"}


def _csv(val: str | None, default: list[str]) -> list[str]:
    if not val:
        return default
    return [v.strip() for v in val.split(",") if v.strip()]


def _int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    return int(val)


def _float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    return float(val)


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    env: str = os.getenv("ENV", "local")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./authstarter.db")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Email provider (Resend)
    resend_api_key: str | None = os.getenv("RESEND_API_KEY") or None
    from_email: str | None = os.getenv("FROM_EMAIL") or None
    email_api_url: str = os.getenv("EMAIL_API_URL", "https://api.resend.com/emails")

    # Public base URL for deep links in emails
    app_url: str | None = (os.getenv("APP_URL") or "").rstrip("/") or None

    # Google OAuth
    google_client_id: str | None = os.getenv("GOOGLE_CLIENT_ID") or None
    google_tokeninfo_url: str = os.getenv(
        "GOOGLE_TOKENINFO_URL",
        "https://oauth2.googleapis.com/tokeninfo",
    )

    http_timeout_seconds: float = _float(os.getenv("HTTP_TIMEOUT_SECONDS"), 10.0)

    # One-time codes
    verification_code_ttl_hours: int = _int(os.getenv("VERIFICATION_CODE_TTL_HOURS"), 24)
    reset_code_ttl_minutes: int = _int(os.getenv("RESET_CODE_TTL_MINUTES"), 60)

    # Celery email retry
    email_retry_enabled: bool = _bool(os.getenv("EMAIL_RETRY_ENABLED"), default=True)
    email_retry_max: int = _int(os.getenv("EMAIL_RETRY_MAX"), 5)
    celery_broker_url: str = os.getenv(
        "CELERY_BROKER_URL",
        os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    )
    celery_result_backend: str = os.getenv(
        "CELERY_RESULT_BACKEND",
        "redis://localhost:6379/1",
    )

    # Dev routes (seed, provider smoke test)
    dev_routes_enabled: bool = _bool(
        os.getenv("DEV_ROUTES_ENABLED"),
        default=(os.getenv("ENV", "local") == "local"),
    )
    dev_api_key: str | None = os.getenv("DEV_API_KEY") or None

    cors_allow_origins: list[str] = field(
        default_factory=lambda: _csv(
            os.getenv("CORS_ALLOW_ORIGINS"),
            default=["http://localhost:3000", "http://127.0.0.1:3000"],
        )
    )

    security_headers_enabled: bool = _bool(
        os.getenv("SECURITY_HEADERS_ENABLED"),
        default=True,
    )

    rate_limit_enabled: bool = _bool(os.getenv("RATE_LIMIT_ENABLED"), default=True)
    rate_limit_default: str = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
    # Tighter budget for credential and code endpoints
    rate_limit_auth: str = os.getenv("RATE_LIMIT_AUTH", "10/minute")
    rate_limit_exempt_paths: list[str] = field(
        default_factory=lambda: _csv(
            os.getenv("RATE_LIMIT_EXEMPT_PATHS"),
            default=["/health", "/metrics"],
        )
    )


REQUIRED_SETTINGS: dict[str, str] = {
    "resend_api_key": "RESEND_API_KEY",
    "from_email": "FROM_EMAIL",
    "app_url": "APP_URL",
    "google_client_id": "GOOGLE_CLIENT_ID",
}


def check_required_settings(cfg: Settings) -> None:
    known = {f.name for f in fields(cfg)}
    missing = [
        env_name
        for attr, env_name in REQUIRED_SETTINGS.items()
        if attr in known and not getattr(cfg, attr)
    ]
    if missing:
        raise ConfigError(f"missing required configuration: {', '.join(missing)}")


settings = Settings()
