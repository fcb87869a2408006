import pytest

from authstarter.middleware.rate_limit import Rate, parse_rate, rate_for_path


def test_parse_rate():
    assert parse_rate("10/minute") == Rate(limit=10, window_seconds=60)
    assert parse_rate(" 120/Hour ") == Rate(limit=120, window_seconds=3600)
    assert parse_rate("5/sec") == Rate(limit=5, window_seconds=1)


@pytest.mark.parametrize("rate", ["10", "10/fortnight", "ten/minute"])
def test_parse_rate_rejects_bad_values(rate):
    with pytest.raises(ValueError):
        parse_rate(rate)


def test_auth_endpoints_use_tighter_tier():
    assert rate_for_path("/v1/auth/login") == "10/minute"
    assert rate_for_path("/health") == "60/minute"
