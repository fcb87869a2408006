from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _now_for_dt(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; compare like with like.
    now = now_utc()
    return now.replace(tzinfo=None) if value.tzinfo is None else now


def generate_code() -> str:
    """Six-digit one-time code, uniform in [100000, 999999]."""
    return str(100000 + secrets.randbelow(900000))


def codes_match(submitted: str, stored: str | None) -> bool:
    if not stored:
        return False
    return secrets.compare_digest(submitted.encode("utf-8"), stored.encode("utf-8"))


def is_expired(expires_at: datetime | None) -> bool:
    if expires_at is None:
        return True
    return expires_at < _now_for_dt(expires_at)


def expiry_in(*, hours: int = 0, minutes: int = 0) -> datetime:
    return now_utc() + timedelta(hours=hours, minutes=minutes)
