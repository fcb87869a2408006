from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from authstarter.auth.google import GoogleProfile
from authstarter.client import AuthApiClient, AuthClientError, AuthSession
from authstarter.client.session import SESSION_KEY
from authstarter.services.error_codes import ErrorCode
from authstarter.storage import (
    FileSessionStorage,
    MemorySessionStorage,
    create_session_storage,
)

PASSWORD = "Password1"


@pytest.fixture
def api(client: TestClient) -> AuthApiClient:
    return AuthApiClient(client)


def _verified_account(api: AuthApiClient, mailer, email: str = "session@example.com") -> str:
    api.register(email, "Session User", PASSWORD)
    api.verify_email(email, mailer.last_code("verification", email))
    return email


def test_login_populates_session_and_cache(api: AuthApiClient, mailer):
    email = _verified_account(api, mailer)
    storage = MemorySessionStorage()
    session = AuthSession(api, storage)
    assert session.is_authenticated is False

    profile = session.login(email, PASSWORD)

    assert session.is_authenticated is True
    assert session.user == profile
    assert profile.email == email
    cached = storage.get_item(SESSION_KEY)
    assert cached is not None
    assert "password" not in cached


def test_session_restores_from_storage(api: AuthApiClient, mailer, tmp_path):
    email = _verified_account(api, mailer)
    storage = FileSessionStorage(tmp_path)
    AuthSession(api, storage).login(email, PASSWORD)

    resumed = AuthSession(api, FileSessionStorage(tmp_path))

    assert resumed.is_authenticated is True
    assert resumed.user.email == email


def test_corrupt_cache_is_discarded(api: AuthApiClient):
    storage = MemorySessionStorage()
    storage.set_item(SESSION_KEY, "{not json")

    session = AuthSession(api, storage)

    assert session.user is None
    assert storage.get_item(SESSION_KEY) is None


def test_failed_login_leaves_state_unchanged(api: AuthApiClient, mailer):
    email = _verified_account(api, mailer)
    session = AuthSession(api)

    with pytest.raises(AuthClientError) as exc_info:
        session.login(email, "WrongPass9")

    assert exc_info.value.code == ErrorCode.INVALID_CREDENTIALS.value
    assert exc_info.value.status_code == 401
    assert session.user is None


def test_unverified_login_surfaces_not_verified(api: AuthApiClient):
    api.register("unverified@example.com", "Pending", PASSWORD)
    session = AuthSession(api)

    with pytest.raises(AuthClientError) as exc_info:
        session.login("unverified@example.com", PASSWORD)

    assert exc_info.value.code == ErrorCode.EMAIL_NOT_VERIFIED.value
    assert session.is_authenticated is False


def test_logout_clears_user_and_cache(api: AuthApiClient, mailer):
    email = _verified_account(api, mailer)
    storage = MemorySessionStorage()
    session = AuthSession(api, storage)
    session.login(email, PASSWORD)

    session.logout()

    assert session.user is None
    assert storage.get_item(SESSION_KEY) is None
    # Logging out twice is harmless.
    session.logout()


def test_google_login_through_session(api: AuthApiClient, google):
    google.profiles["cred"] = GoogleProfile(sub="g-1", email="Person@Gmail.com", name="Person")
    session = AuthSession(api)

    profile = session.login_with_google("cred")

    assert profile.email == "person@gmail.com"
    assert profile.is_email_verified is True
    assert session.user == profile


def test_client_checks_forms_before_sending(api: AuthApiClient, mailer):
    with pytest.raises(AuthClientError) as exc_info:
        api.register("not-an-email", "Name", PASSWORD)
    assert exc_info.value.code == ErrorCode.INVALID_INPUT.value
    assert exc_info.value.status_code is None

    with pytest.raises(AuthClientError, match="Passwords do not match"):
        api.reset_password("a@example.com", "123456", "NewPassword2", "NewPassword3")

    assert mailer.sent == []


def test_client_password_reset_round(api: AuthApiClient, mailer):
    email = _verified_account(api, mailer, "clientreset@example.com")

    message = api.request_password_reset(email)
    assert message == api.request_password_reset("nobody@example.com")

    code = mailer.last_code("password_reset", email)
    api.reset_password(email, code, "NewPassword2", "NewPassword2")

    assert api.login(email, "NewPassword2").email == email


def test_client_reports_transport_failure():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(transport=httpx.MockTransport(refuse), base_url="http://auth.test")
    api = AuthApiClient(http)

    with pytest.raises(AuthClientError) as exc_info:
        api.login("a@example.com", PASSWORD)

    assert exc_info.value.code == ErrorCode.UPSTREAM_UNAVAILABLE.value


def test_client_handles_non_json_error():
    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    http = httpx.Client(transport=httpx.MockTransport(broken), base_url="http://auth.test")

    with pytest.raises(AuthClientError) as exc_info:
        AuthApiClient(http).login("a@example.com", PASSWORD)

    assert exc_info.value.status_code == 502


def test_file_storage_rejects_escaping_keys(tmp_path):
    storage = FileSessionStorage(tmp_path)

    with pytest.raises(ValueError):
        storage.set_item("../outside", "x")

    storage.set_item("nested/key", "value")
    assert storage.get_item("nested/key") == "value"
    storage.remove_item("nested/key")
    assert storage.get_item("nested/key") is None


def test_create_session_storage(tmp_path):
    assert isinstance(create_session_storage(), MemorySessionStorage)
    assert isinstance(create_session_storage("local", tmp_path), FileSessionStorage)

    with pytest.raises(ValueError):
        create_session_storage("local")
    with pytest.raises(ValueError):
        create_session_storage("redis")


def test_undecodable_cache_file_starts_logged_out(api: AuthApiClient, tmp_path):
    (tmp_path / SESSION_KEY).write_bytes(b"\xff\xfe\x00garbage")

    session = AuthSession(api, FileSessionStorage(tmp_path))

    assert session.user is None
    assert session.is_authenticated is False
    assert not (tmp_path / SESSION_KEY).exists()


def test_unreadable_cache_starts_logged_out(api: AuthApiClient):
    class BrokenStorage(MemorySessionStorage):
        def get_item(self, key: str) -> str | None:
            raise PermissionError("denied")

    assert AuthSession(api, BrokenStorage()).user is None
