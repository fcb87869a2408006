from __future__ import annotations

from functools import lru_cache

from authstarter.core.config import settings
from authstarter.mail.dispatcher import EmailDispatcher
from authstarter.mail.resend import ResendEmailSender


def create_email_dispatcher() -> EmailDispatcher:
    sender = ResendEmailSender(
        api_key=settings.resend_api_key or "",
        api_url=settings.email_api_url,
        timeout=settings.http_timeout_seconds,
    )
    return EmailDispatcher(
        sender,
        from_email=settings.from_email or "",
        app_url=settings.app_url or "",
        verification_ttl_hours=settings.verification_code_ttl_hours,
        reset_ttl_minutes=settings.reset_code_ttl_minutes,
    )


@lru_cache(maxsize=1)
def get_email_dispatcher() -> EmailDispatcher:
    return create_email_dispatcher()
