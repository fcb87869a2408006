from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import timedelta

import pytest
from kombu.exceptions import OperationalError

from authstarter.auth.codes import expiry_in, now_utc
from authstarter.auth.password import hash_password
from authstarter.models import User
from authstarter.models.user import AuthProvider
from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import UpstreamError
from authstarter.worker import outbox, tasks
from authstarter.worker.outbox import PASSWORD_RESET, VERIFICATION, enqueue_email_retry


def _pending_user(db_session, email: str = "worker@example.com", **fields) -> User:
    values = dict(
        email=email,
        name="Worker",
        password_hash=hash_password("Password1"),
        provider=AuthProvider.EMAIL,
        is_email_verified=False,
        email_verification_code="123456",
        email_verification_expires=expiry_in(hours=24),
        email_verification_sent_at=now_utc(),
    )
    values.update(fields)
    user = User(**values)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def task_mailer(mailer, monkeypatch):
    monkeypatch.setattr(tasks, "get_email_dispatcher", lambda: mailer)
    return mailer


def test_enqueue_is_noop_when_disabled():
    assert enqueue_email_retry(VERIFICATION, uuid.uuid4()) is False


def test_enqueue_sends_task(monkeypatch):
    calls = []
    monkeypatch.setattr(outbox, "settings", replace(outbox.settings, email_retry_enabled=True))
    monkeypatch.setattr(
        outbox.celery_app, "send_task", lambda name, args: calls.append((name, args))
    )
    user_id = uuid.uuid4()

    assert enqueue_email_retry(PASSWORD_RESET, user_id) is True
    assert calls == [("deliver_auth_email", [PASSWORD_RESET, str(user_id)])]


def test_enqueue_survives_broker_outage(monkeypatch):
    def unreachable(name, args):
        raise OperationalError("broker down")

    monkeypatch.setattr(outbox, "settings", replace(outbox.settings, email_retry_enabled=True))
    monkeypatch.setattr(outbox.celery_app, "send_task", unreachable)

    assert enqueue_email_retry(VERIFICATION, uuid.uuid4()) is False


def test_deliver_sends_pending_verification(db_session, task_mailer):
    user = _pending_user(db_session)

    result = tasks.deliver_auth_email.run(VERIFICATION, str(user.id))

    assert result["status"] == "sent"
    assert task_mailer.last_code("verification", "worker@example.com") == "123456"


def test_deliver_sends_pending_reset(db_session, task_mailer):
    user = _pending_user(
        db_session,
        is_email_verified=True,
        email_verification_code=None,
        email_verification_expires=None,
        email_verification_sent_at=None,
        password_reset_code="654321",
        password_reset_expires=expiry_in(minutes=60),
    )

    result = tasks.deliver_auth_email.run(PASSWORD_RESET, str(user.id))

    assert result["status"] == "sent"
    assert task_mailer.last_code("password_reset", "worker@example.com") == "654321"


def test_deliver_skips_when_nothing_pending(db_session, task_mailer):
    verified = _pending_user(
        db_session,
        is_email_verified=True,
        email_verification_code=None,
        email_verification_expires=None,
        email_verification_sent_at=None,
    )
    expired = _pending_user(
        db_session,
        email="expired@example.com",
        email_verification_expires=now_utc() - timedelta(hours=1),
    )

    assert tasks.deliver_auth_email.run(VERIFICATION, str(verified.id))["status"] == "skipped"
    assert tasks.deliver_auth_email.run(PASSWORD_RESET, str(verified.id))["status"] == "skipped"
    assert tasks.deliver_auth_email.run(VERIFICATION, str(expired.id))["status"] == "skipped"
    assert tasks.deliver_auth_email.run(VERIFICATION, str(uuid.uuid4()))["reason"] == "user_not_found"
    assert task_mailer.sent == []


def test_deliver_propagates_provider_failure(db_session, task_mailer):
    user = _pending_user(db_session)
    task_mailer.fail_with = UpstreamError(ErrorCode.EMAIL_DELIVERY_FAILED.value, "provider down")

    with pytest.raises(UpstreamError):
        tasks.deliver_auth_email.run(VERIFICATION, str(user.id))
