from __future__ import annotations

import structlog

from authstarter.core.logging import email_domain
from authstarter.mail.base import EmailSender
from authstarter.mail.templates import (
    password_reset_email,
    provider_test_email,
    verification_email,
)

logger = structlog.get_logger()


class EmailDispatcher:
    """Builds the auth emails and hands them to an :class:`EmailSender`.

    Delivery failures propagate as ``UpstreamError`` (``EMAIL_DELIVERY_FAILED``
    or ``UPSTREAM_UNAVAILABLE``); the calling handler decides what that means
    for its already-committed state.
    """

    def __init__(
        self,
        sender: EmailSender,
        *,
        from_email: str,
        app_url: str,
        verification_ttl_hours: int = 24,
        reset_ttl_minutes: int = 60,
    ) -> None:
        self._sender = sender
        self._from_email = from_email
        self._app_url = app_url
        self._verification_ttl_hours = verification_ttl_hours
        self._reset_ttl_minutes = reset_ttl_minutes

    def send_verification(self, email: str, code: str, name: str) -> str:
        rendered = verification_email(
            app_url=self._app_url,
            email=email,
            code=code,
            name=name,
            ttl_hours=self._verification_ttl_hours,
        )
        message_id = self._sender.send(
            to=email, subject=rendered.subject, html=rendered.html, from_email=self._from_email
        )
        logger.info("verification_email_sent", email_domain=email_domain(email), message_id=message_id)
        return message_id

    def send_password_reset(self, email: str, code: str, name: str) -> str:
        rendered = password_reset_email(
            app_url=self._app_url,
            email=email,
            code=code,
            name=name,
            ttl_minutes=self._reset_ttl_minutes,
        )
        message_id = self._sender.send(
            to=email, subject=rendered.subject, html=rendered.html, from_email=self._from_email
        )
        logger.info("reset_email_sent", email_domain=email_domain(email), message_id=message_id)
        return message_id

    def send_test(self, to: str) -> str:
        rendered = provider_test_email(to=to, from_email=self._from_email)
        return self._sender.send(
            to=to, subject=rendered.subject, html=rendered.html, from_email=self._from_email
        )
