from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import httpx
import structlog

from authstarter.core.config import settings
from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import AuthenticationError, ServiceError, UpstreamError

logger = structlog.get_logger()


@dataclass(frozen=True)
class GoogleProfile:
    sub: str
    email: str
    name: str | None = None
    picture: str | None = None


def _invalid_token() -> AuthenticationError:
    return AuthenticationError(ErrorCode.INVALID_GOOGLE_TOKEN.value, "Invalid Google token")


def _invalid_user(message: str) -> AuthenticationError:
    return AuthenticationError(ErrorCode.INVALID_GOOGLE_USER.value, message)


class GoogleTokenVerifier:
    """Checks a Google ID token against the tokeninfo endpoint."""

    def __init__(
        self,
        client_id: str | None,
        tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._client_id = client_id
        self._tokeninfo_url = tokeninfo_url
        self._client = client or httpx.Client(timeout=timeout)

    def verify(self, credential: str) -> GoogleProfile:
        try:
            return self._verify(credential)
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("google_auth_unexpected_error")
            raise UpstreamError(
                ErrorCode.GOOGLE_AUTH_ERROR.value, "Google authentication failed"
            ) from exc

    def _verify(self, credential: str) -> GoogleProfile:
        try:
            resp = self._client.get(self._tokeninfo_url, params={"id_token": credential})
        except httpx.TransportError as exc:
            logger.warning("google_tokeninfo_unreachable", error=type(exc).__name__)
            raise UpstreamError(
                ErrorCode.UPSTREAM_UNAVAILABLE.value, "Google is unavailable, try again later"
            ) from exc

        if not resp.is_success:
            logger.info("google_token_rejected", status_code=resp.status_code)
            raise _invalid_token()

        try:
            info: Any = resp.json()
        except ValueError as exc:
            raise _invalid_token() from exc
        if not isinstance(info, dict):
            raise _invalid_token()

        if self._client_id and info.get("aud") != self._client_id:
            logger.info("google_token_wrong_audience")
            raise _invalid_token()

        email = info.get("email")
        sub = info.get("sub")
        if not email or not sub:
            raise _invalid_user("Google account did not provide an email address")
        if str(info.get("email_verified", "true")).lower() == "false":
            raise _invalid_user("Google account email is not verified")

        return GoogleProfile(
            sub=str(sub),
            email=str(email).strip().lower(),
            name=(info.get("name") or None),
            picture=(info.get("picture") or None),
        )


@lru_cache(maxsize=1)
def get_google_verifier() -> GoogleTokenVerifier:
    return GoogleTokenVerifier(
        client_id=settings.google_client_id,
        tokeninfo_url=settings.google_tokeninfo_url,
        timeout=settings.http_timeout_seconds,
    )
