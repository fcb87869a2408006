from __future__ import annotations

from dataclasses import replace

import pytest

from authstarter.core.config import ConfigError, Settings, _bool, _csv, check_required_settings, settings


def test_test_settings_are_complete():
    check_required_settings(settings)


def test_missing_settings_are_all_named():
    cfg = replace(settings, resend_api_key=None, google_client_id=None)

    with pytest.raises(ConfigError) as exc_info:
        check_required_settings(cfg)

    message = str(exc_info.value)
    assert "RESEND_API_KEY" in message
    assert "GOOGLE_CLIENT_ID" in message
    assert "FROM_EMAIL" not in message


def test_empty_string_counts_as_missing():
    with pytest.raises(ConfigError, match="APP_URL"):
        check_required_settings(replace(settings, app_url=""))


def test_defaults_for_code_lifetimes():
    cfg = Settings()
    assert cfg.verification_code_ttl_hours == 24
    assert cfg.reset_code_ttl_minutes == 60


def test_env_parsers():
    assert _bool(None, default=True) is True
    assert _bool(" Yes ") is True
    assert _bool("off", default=True) is False
    assert _csv("a, b,,c", default=["x"]) == ["a", "b", "c"]
    assert _csv("", default=["x"]) == ["x"]
