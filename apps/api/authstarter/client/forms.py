from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from authstarter.auth import validators
from authstarter.client.errors import AuthClientError
from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import ServiceError

T = TypeVar("T")


def _checked(fn: Callable[[], T]) -> T:
    try:
        return fn()
    except ServiceError as exc:
        raise AuthClientError(exc.code, exc.message) from exc


def login_form(email: str, password: str) -> dict[str, str]:
    return _checked(
        lambda: {
            "email": validators.validate_email(email),
            "password": validators.validate_login_password(password),
        }
    )


def register_form(email: str, name: str, password: str) -> dict[str, str]:
    return _checked(
        lambda: {
            "name": validators.validate_name(name),
            "email": validators.validate_email(email),
            "password": validators.validate_new_password(password),
        }
    )


def email_form(email: str) -> dict[str, str]:
    return _checked(lambda: {"email": validators.validate_email(email)})


def verify_email_form(email: str, code: str) -> dict[str, str]:
    return _checked(
        lambda: {
            "email": validators.validate_email(email),
            "code": validators.validate_verification_code(code),
        }
    )


def password_reset_form(
    email: str, code: str, new_password: str, confirm_password: str | None = None
) -> dict[str, str]:
    data = _checked(
        lambda: {
            "email": validators.validate_email(email),
            "code": validators.validate_reset_code(code),
            "new_password": validators.validate_new_password(new_password),
        }
    )
    if confirm_password is not None and confirm_password != new_password:
        raise AuthClientError(ErrorCode.INVALID_INPUT.value, "Passwords do not match")
    return data


def google_form(credential: str) -> dict[str, str]:
    return _checked(lambda: {"credential": validators.validate_google_credential(credential)})
