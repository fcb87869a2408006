from __future__ import annotations

import re

from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import ValidationError

EMAIL_MAX_LENGTH = 254
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
CODE_MAX_LENGTH = 10
GOOGLE_CREDENTIAL_MAX_LENGTH = 4096

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
VERIFICATION_CODE_RE = re.compile(r"^\d{6}$")
LETTER_RE = re.compile(r"[A-Za-z]")
DIGIT_RE = re.compile(r"\d")


def _invalid(message: str) -> ValidationError:
    return ValidationError(ErrorCode.INVALID_INPUT.value, message)


def _require_text(value: str | None, label: str, *, strip: bool = True) -> str:
    if not isinstance(value, str):
        raise _invalid(f"{label} is required")
    text = value.strip() if strip else value
    if not text:
        raise _invalid(f"{label} is required")
    if "\x00" in text:
        raise _invalid(f"Invalid characters in {label.lower()}")
    return text


def validate_email(value: str | None) -> str:
    """Return the trimmed, lower-cased address or raise ``INVALID_INPUT``."""
    email = _require_text(value, "Email")
    if len(email) > EMAIL_MAX_LENGTH:
        raise _invalid(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    if not EMAIL_RE.match(email):
        raise _invalid("Invalid email address")
    return email.lower()


def validate_name(value: str | None) -> str:
    name = _require_text(value, "Name")
    if len(name) > NAME_MAX_LENGTH:
        raise _invalid(f"Name must be at most {NAME_MAX_LENGTH} characters")
    return name


def validate_new_password(value: str | None) -> str:
    """Strength rules for passwords being set (register, reset).

    Passwords are not trimmed: surrounding spaces are part of the secret.
    """
    password = _require_text(value, "Password", strip=False)
    if len(password) < PASSWORD_MIN_LENGTH:
        raise _invalid(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password) > PASSWORD_MAX_LENGTH:
        raise _invalid(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")
    if not (LETTER_RE.search(password) and DIGIT_RE.search(password)):
        raise _invalid("Password must contain at least one letter and one number")
    return password


def validate_login_password(value: str | None) -> str:
    password = _require_text(value, "Password", strip=False)
    if len(password) > PASSWORD_MAX_LENGTH:
        raise _invalid(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")
    return password


def validate_verification_code(value: str | None) -> str:
    code = _require_text(value, "Verification code")
    if not VERIFICATION_CODE_RE.match(code):
        raise _invalid("Verification code must be 6 digits")
    return code


def validate_reset_code(value: str | None) -> str:
    code = _require_text(value, "Reset code")
    if len(code) > CODE_MAX_LENGTH:
        raise _invalid("Invalid reset code")
    return code


def validate_google_credential(value: str | None) -> str:
    credential = _require_text(value, "Google credential")
    if len(credential) > GOOGLE_CREDENTIAL_MAX_LENGTH:
        raise _invalid("Google credential is too long")
    return credential
