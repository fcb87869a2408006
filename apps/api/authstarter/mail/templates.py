from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape
from urllib.parse import urlencode


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


def _deep_link(app_url: str, path: str, email: str, code: str) -> str:
    return f"{app_url.rstrip('/')}{path}?{urlencode({'code': code, 'email': email})}"


def _code_block(code: str) -> str:
    return (
        '<div style="background: #f5f5f5; padding: 16px; border-radius: 8px; '
        'text-align: center; margin: 16px 0;">'
        '<span style="font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #333;">'
        f"{escape(code)}</span></div>"
    )


def _button(url: str, label: str, colour: str) -> str:
    return (
        f'<a href="{escape(url, quote=True)}" style="display: inline-block; background: {colour}; '
        "color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; "
        f'margin: 16px 0;">{label}</a>'
    )


def verification_email(*, app_url: str, email: str, code: str, name: str, ttl_hours: int) -> RenderedEmail:
    url = _deep_link(app_url, "/verify-email", email, code)
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f"<h2>Welcome {escape(name)}!</h2>"
        "<p>Please verify your email address by clicking the button below:</p>"
        f"{_button(url, 'Verify Email', '#007bff')}"
        "<p>Or enter this verification code:</p>"
        f"{_code_block(code)}"
        '<p style="color: #666; font-size: 12px;">'
        f"This code will expire in {ttl_hours} hours. "
        "If you didn't create an account, please ignore this email.</p>"
        "</div>"
    )
    return RenderedEmail(subject="Verify your email address", html=html)


def password_reset_email(*, app_url: str, email: str, code: str, name: str, ttl_minutes: int) -> RenderedEmail:
    url = _deep_link(app_url, "/verify-reset", email, code)
    expiry = "1 hour" if ttl_minutes == 60 else f"{ttl_minutes} minutes"
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>Password Reset Request</h2>"
        f"<p>Hi {escape(name)},</p>"
        "<p>Click the button below to reset your password:</p>"
        f"{_button(url, 'Reset Password', '#dc3545')}"
        "<p>Or enter this reset code:</p>"
        f"{_code_block(code)}"
        '<p style="color: #666; font-size: 12px;">'
        f"This code will expire in {expiry}. "
        "If you didn't request a password reset, please ignore this email.</p>"
        "</div>"
    )
    return RenderedEmail(subject="Reset your password", html=html)


def provider_test_email(*, to: str, from_email: str) -> RenderedEmail:
    sent_at = datetime.now(timezone.utc).isoformat()
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>API Key Test Successful!</h2>"
        "<p>If you're seeing this email, your email provider API key is working correctly.</p>"
        "<ul>"
        f"<li>From: {escape(from_email)}</li>"
        f"<li>To: {escape(to)}</li>"
        f"<li>Time: {sent_at}</li>"
        "</ul></div>"
    )
    return RenderedEmail(subject="Email provider test", html=html)
