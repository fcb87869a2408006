from __future__ import annotations

from typing import Any

import httpx

from authstarter.api.v1.schemas.auth import PublicProfile
from authstarter.client import forms
from authstarter.client.errors import AuthClientError
from authstarter.services.error_codes import ErrorCode


class AuthApiClient:
    """Thin client for the ``/v1/auth`` endpoints.

    Every call runs the form checks locally first; the server repeats them.
    Failures raise :class:`AuthClientError` carrying the server's error code.
    """

    def __init__(self, http: httpx.Client, prefix: str = "/v1/auth") -> None:
        self._http = http
        self._prefix = prefix.rstrip("/")

    def _post(self, path: str, payload: dict[str, str]) -> dict[str, Any]:
        try:
            resp = self._http.post(f"{self._prefix}{path}", json=payload)
        except httpx.TransportError as exc:
            raise AuthClientError(
                ErrorCode.UPSTREAM_UNAVAILABLE.value, "Could not reach the server"
            ) from exc

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            raise AuthClientError(
                "HTTP_ERROR", f"unexpected response (status {resp.status_code})", resp.status_code
            )
        if not resp.is_success or not body.get("success"):
            raise AuthClientError(
                str(body.get("error") or "HTTP_ERROR"),
                str(body.get("message") or f"request failed (status {resp.status_code})"),
                resp.status_code,
            )
        return body

    def register(self, email: str, name: str, password: str) -> dict[str, Any]:
        return self._post("/register", forms.register_form(email, name, password))

    def verify_email(self, email: str, code: str) -> dict[str, Any]:
        return self._post("/verify-email", forms.verify_email_form(email, code))

    def resend_verification(self, email: str) -> str:
        return self._post("/resend-verification", forms.email_form(email))["message"]

    def request_password_reset(self, email: str) -> str:
        return self._post("/password-reset/request", forms.email_form(email))["message"]

    def reset_password(
        self, email: str, code: str, new_password: str, confirm_password: str | None = None
    ) -> str:
        payload = forms.password_reset_form(email, code, new_password, confirm_password)
        return self._post("/password-reset/confirm", payload)["message"]

    def login(self, email: str, password: str) -> PublicProfile:
        body = self._post("/login", forms.login_form(email, password))
        return PublicProfile.model_validate(body["data"])

    def google_auth(self, credential: str) -> tuple[PublicProfile, bool]:
        body = self._post("/google", forms.google_form(credential))
        data = body["data"]
        return PublicProfile.model_validate(data["user"]), bool(data["is_new_user"])
