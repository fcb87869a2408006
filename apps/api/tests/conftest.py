from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

# Ensure configuration is set before app import
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("FROM_EMAIL", "noreply@example.com")
os.environ.setdefault("APP_URL", "http://localhost:3000")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("EMAIL_RETRY_ENABLED", "false")
os.environ.setdefault("DEV_ROUTES_ENABLED", "true")

from authstarter.auth.google import GoogleProfile, get_google_verifier  # noqa: E402
from authstarter.db import SessionLocal, init_db  # noqa: E402
from authstarter.mail.factory import get_email_dispatcher  # noqa: E402
from authstarter.main import app  # noqa: E402
from authstarter.models import User  # noqa: E402
from authstarter.services.error_codes import ErrorCode  # noqa: E402
from authstarter.services.exceptions import AuthenticationError, UpstreamError  # noqa: E402


class FakeMailer:
    """Records what would have been sent; can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []
        self.fail_with: UpstreamError | None = None

    def _record(self, kind: str, email: str, code: str, name: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"kind": kind, "email": email, "code": code, "name": name})
        return f"msg_{len(self.sent)}"

    def send_verification(self, email: str, code: str, name: str) -> str:
        return self._record("verification", email, code, name)

    def send_password_reset(self, email: str, code: str, name: str) -> str:
        return self._record("password_reset", email, code, name)

    def send_test(self, to: str) -> str:
        return self._record("test", to, "", "")

    def last_code(self, kind: str, email: str) -> str:
        for item in reversed(self.sent):
            if item["kind"] == kind and item["email"] == email:
                return item["code"]
        raise AssertionError(f"no {kind} email sent to {email}")


class FakeGoogleVerifier:
    """Maps credential strings to profiles; unknown credentials are rejected."""

    def __init__(self) -> None:
        self.profiles: dict[str, GoogleProfile] = {}

    def verify(self, credential: str) -> GoogleProfile:
        profile = self.profiles.get(credential)
        if profile is None:
            raise AuthenticationError(ErrorCode.INVALID_GOOGLE_TOKEN.value, "Invalid Google token")
        return profile


@pytest.fixture(scope="session", autouse=True)
def create_schema():
    init_db()
    yield


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def google() -> FakeGoogleVerifier:
    return FakeGoogleVerifier()


@pytest.fixture
def client(mailer: FakeMailer, google: FakeGoogleVerifier):
    app.dependency_overrides[get_email_dispatcher] = lambda: mailer
    app.dependency_overrides[get_google_verifier] = lambda: google
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    # Ensure a clean slate for each test
    db = SessionLocal()
    try:
        db.execute(delete(User))
        db.commit()
    finally:
        db.close()
    yield
