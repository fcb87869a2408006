from authstarter.core.logging import email_domain, redact_secrets


def test_secret_keys_are_redacted():
    event = redact_secrets(
        None,
        "info",
        {"event": "login_failed", "password": "Password1", "code": "123456", "user_id": "u1"},
    )

    assert event["password"] == "[redacted]"
    assert event["code"] == "[redacted]"
    assert event["user_id"] == "u1"


def test_email_domain():
    assert email_domain("someone@example.com") == "example.com"
    assert email_domain("not-an-address") is None
    assert email_domain(None) is None
