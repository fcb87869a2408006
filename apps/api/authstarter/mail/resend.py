from __future__ import annotations

import httpx
import structlog

from authstarter.mail.base import EmailSender
from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import UpstreamError

logger = structlog.get_logger()


class ResendEmailSender(EmailSender):
    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, *, to: str, subject: str, html: str, from_email: str) -> str:
        try:
            resp = self._client.post(
                self._api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={"from": from_email, "to": [to], "subject": subject, "html": html},
            )
        except httpx.TransportError as exc:
            logger.warning("email_provider_unreachable", error=type(exc).__name__)
            raise UpstreamError(
                ErrorCode.UPSTREAM_UNAVAILABLE.value, "email provider is unavailable"
            ) from exc

        if resp.status_code >= 400:
            detail = _error_message(resp)
            logger.warning("email_provider_rejected", status_code=resp.status_code, detail=detail)
            raise UpstreamError(
                ErrorCode.EMAIL_DELIVERY_FAILED.value,
                f"email provider error {resp.status_code}: {detail}",
            )

        try:
            message_id = resp.json().get("id")
        except ValueError:
            message_id = None
        if not message_id:
            raise UpstreamError(
                ErrorCode.EMAIL_DELIVERY_FAILED.value, "email provider returned no message id"
            )
        return str(message_id)


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("name") or resp.reason_phrase)
    return resp.reason_phrase
