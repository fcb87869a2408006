from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

_hasher = PasswordHasher()

# Verified against when an account has no digest, so login does the same work
# whether or not the user exists.
_DUMMY_HASH = _hasher.hash("authstarter-dummy-password-0")


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("password is required")
    try:
        return _hasher.hash(plain)
    except HashingError as exc:
        raise ValueError("failed to hash password") from exc


def verify_password(plain: str, hashed: str | None) -> bool:
    if not plain:
        return False
    if not hashed:
        burn_verification_time(plain)
        return False
    try:
        return _hasher.verify(hashed, plain)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def burn_verification_time(plain: str) -> None:
    try:
        _hasher.verify(_DUMMY_HASH, plain or "-")
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        pass
