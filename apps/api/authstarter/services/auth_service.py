from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass

import structlog
from sqlalchemy.orm import Session

from authstarter.auth.codes import (
    codes_match,
    expiry_in,
    generate_code,
    is_expired,
    now_utc,
)
from authstarter.auth.google import GoogleTokenVerifier
from authstarter.auth.password import hash_password, verify_password
from authstarter.auth.validators import (
    NAME_MAX_LENGTH,
    validate_email,
    validate_google_credential,
    validate_login_password,
    validate_name,
    validate_new_password,
    validate_reset_code,
    validate_verification_code,
)
from authstarter.core.config import settings
from authstarter.core.logging import email_domain
from authstarter.mail.dispatcher import EmailDispatcher
from authstarter.models import User
from authstarter.models.user import AuthProvider, Verified
from authstarter.services import user_store
from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import (
    AuthenticationError,
    CodeRejectedError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamError,
    ValidationError,
)
from authstarter.worker.outbox import PASSWORD_RESET, VERIFICATION, enqueue_email_retry

logger = structlog.get_logger()

REGISTERED_MESSAGE = "Registration successful. Please check your email for a verification code."
REGISTERED_EMAIL_FAILED_MESSAGE = (
    "Account created, but we could not send the verification email. "
    "Please request a new verification code."
)
EMAIL_VERIFIED_MESSAGE = "Email verified successfully"
ALREADY_VERIFIED_MESSAGE = "Email is already verified"
RESEND_MESSAGE = "If an account with that email needs verification, a new code has been sent."
RESEND_ALREADY_VERIFIED_MESSAGE = "This email may already be verified. Try logging in."
RESET_REQUESTED_MESSAGE = "If an account exists with that email, a password reset code has been sent."
PASSWORD_RESET_MESSAGE = "Password has been reset successfully. You can now log in."
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_RESET_CODE_MESSAGE = "Invalid reset code"


@dataclass(frozen=True)
class RegisterResult:
    user_id: uuid.UUID
    message: str
    email_sent: bool


@dataclass(frozen=True)
class VerifyResult:
    message: str
    already_verified: bool


def _deliver(kind: str, user_id: uuid.UUID, send: Callable[[], str]) -> bool:
    """Send after commit; on failure log, queue a retry and report False."""
    try:
        send()
    except UpstreamError as exc:
        logger.warning("email_delivery_failed", kind=kind, user_id=str(user_id), error=exc.code)
        enqueue_email_retry(kind, user_id)
        return False
    return True


def register(db: Session, mailer: EmailDispatcher, email: str, name: str, password: str) -> RegisterResult:
    email = validate_email(email)
    name = validate_name(name)
    password = validate_new_password(password)

    # Friendlier early error; the unique index in insert() is the real guard.
    if user_store.find_by_email(db, email) is not None:
        raise ConflictError(
            ErrorCode.DUPLICATE_EMAIL.value, "An account with this email already exists"
        )

    now = now_utc()
    code = generate_code()
    user = User(
        email=email,
        name=name,
        password_hash=hash_password(password),
        provider=AuthProvider.EMAIL,
        is_email_verified=False,
        email_verification_code=code,
        email_verification_expires=expiry_in(hours=settings.verification_code_ttl_hours),
        email_verification_sent_at=now,
        created_at=now,
        updated_at=now,
        last_seen_at=now,
    )
    user_id = user_store.insert(db, user)
    db.commit()
    logger.info("user_registered", user_id=str(user_id), email_domain=email_domain(email))

    sent = _deliver(VERIFICATION, user_id, lambda: mailer.send_verification(email, code, name))
    return RegisterResult(
        user_id=user_id,
        message=REGISTERED_MESSAGE if sent else REGISTERED_EMAIL_FAILED_MESSAGE,
        email_sent=sent,
    )


def verify_email(db: Session, email: str, code: str) -> VerifyResult:
    email = validate_email(email)
    code = validate_verification_code(code)

    user = user_store.find_by_email(db, email)
    if user is None:
        raise NotFoundError(ErrorCode.NOT_FOUND.value, "No account found for this email")

    state = user.verification_state
    if isinstance(state, Verified):
        return VerifyResult(message=ALREADY_VERIFIED_MESSAGE, already_verified=True)

    if not codes_match(code, state.code):
        logger.info("email_verification_rejected", user_id=str(user.id), reason="mismatch")
        raise CodeRejectedError(ErrorCode.INVALID_CODE.value, "Invalid verification code")
    if is_expired(state.expires_at):
        logger.info("email_verification_rejected", user_id=str(user.id), reason="expired")
        raise CodeRejectedError(
            ErrorCode.CODE_EXPIRED.value,
            "Verification code has expired. Please request a new one.",
        )

    now = now_utc()
    user_store.patch(
        db,
        user.id,
        is_email_verified=True,
        email_verification_code=None,
        email_verification_expires=None,
        email_verification_sent_at=None,
        last_seen_at=now,
        updated_at=now,
    )
    db.commit()
    logger.info("email_verified", user_id=str(user.id))
    return VerifyResult(message=EMAIL_VERIFIED_MESSAGE, already_verified=False)


def resend_verification(db: Session, mailer: EmailDispatcher, email: str) -> str:
    email = validate_email(email)

    user = user_store.find_by_email(db, email)
    if user is None:
        logger.info("verification_resend_unknown", email_domain=email_domain(email))
        return RESEND_MESSAGE

    state = user.verification_state
    if isinstance(state, Verified):
        return RESEND_ALREADY_VERIFIED_MESSAGE

    now = now_utc()
    code = generate_code()
    user_store.patch(
        db,
        user.id,
        email_verification_code=code,
        email_verification_expires=expiry_in(hours=settings.verification_code_ttl_hours),
        email_verification_sent_at=now,
    )
    db.commit()
    logger.info("verification_code_reissued", user_id=str(user.id))

    user_id, name = user.id, user.name
    _deliver(VERIFICATION, user_id, lambda: mailer.send_verification(email, code, name))
    return RESEND_MESSAGE


def request_password_reset(db: Session, mailer: EmailDispatcher, email: str) -> str:
    email = validate_email(email)

    user = user_store.find_by_email(db, email)
    if user is None:
        logger.info("password_reset_unknown", email_domain=email_domain(email))
        return RESET_REQUESTED_MESSAGE

    code = generate_code()
    user_store.patch(
        db,
        user.id,
        password_reset_code=code,
        password_reset_expires=expiry_in(minutes=settings.reset_code_ttl_minutes),
    )
    db.commit()
    logger.info("password_reset_requested", user_id=str(user.id))

    user_id, name = user.id, user.name
    _deliver(PASSWORD_RESET, user_id, lambda: mailer.send_password_reset(email, code, name))
    return RESET_REQUESTED_MESSAGE


def reset_password(db: Session, email: str, code: str, new_password: str) -> str:
    email = validate_email(email)
    code = validate_reset_code(code)
    new_password = validate_new_password(new_password)

    user = user_store.find_by_email(db, email)
    reset = user.reset_state if user is not None else None
    # Unknown account and wrong code are indistinguishable to the caller.
    if reset is None or not codes_match(code, reset.code):
        logger.info("password_reset_rejected", email_domain=email_domain(email), reason="invalid")
        raise CodeRejectedError(ErrorCode.INVALID_RESET_CODE.value, INVALID_RESET_CODE_MESSAGE)
    if is_expired(reset.expires_at):
        logger.info("password_reset_rejected", user_id=str(user.id), reason="expired")
        raise CodeRejectedError(
            ErrorCode.CODE_EXPIRED.value, "Reset code has expired. Please request a new one."
        )

    now = now_utc()
    user_store.patch(
        db,
        user.id,
        password_hash=hash_password(new_password),
        password_reset_code=None,
        password_reset_expires=None,
        updated_at=now,
    )
    db.commit()
    logger.info("password_reset_completed", user_id=str(user.id))
    return PASSWORD_RESET_MESSAGE


def login(db: Session, email: str, password: str) -> User:
    email = validate_email(email)
    password = validate_login_password(password)

    user = user_store.find_by_email(db, email)
    # Always run one verification so missing user, missing password and wrong
    # password cost the same.
    password_ok = verify_password(password, user.password_hash if user is not None else None)
    if user is None or not password_ok:
        logger.info("login_failed", email_domain=email_domain(email))
        raise AuthenticationError(ErrorCode.INVALID_CREDENTIALS.value, INVALID_CREDENTIALS_MESSAGE)

    if not user.is_email_verified:
        logger.info("login_unverified", user_id=str(user.id))
        raise PermissionDeniedError(
            ErrorCode.EMAIL_NOT_VERIFIED.value, "Please verify your email before logging in"
        )

    now = now_utc()
    user_store.patch(db, user.id, last_seen_at=now, last_login_at=now)
    db.commit()
    logger.info("login_succeeded", user_id=str(user.id))
    return user


def google_auth(db: Session, verifier: GoogleTokenVerifier, credential: str) -> tuple[User, bool]:
    credential = validate_google_credential(credential)
    profile = verifier.verify(credential)
    try:
        email = validate_email(profile.email)
    except ValidationError as exc:
        raise AuthenticationError(
            ErrorCode.INVALID_GOOGLE_USER.value, "Google account email is not usable"
        ) from exc

    now = now_utc()
    name = (profile.name or "").strip()[:NAME_MAX_LENGTH] or None

    user = user_store.find_by_google_id(db, profile.sub)
    if user is None:
        user = user_store.find_by_email(db, email)
        if user is not None and user.google_id and user.google_id != profile.sub:
            logger.warning("google_link_conflict", user_id=str(user.id))
            raise AuthenticationError(
                ErrorCode.INVALID_GOOGLE_USER.value,
                "This email is linked to a different Google account",
            )
    if user is not None:
        fields = dict(
            google_id=profile.sub,
            provider=AuthProvider.GOOGLE,
            is_email_verified=True,
            email_verification_code=None,
            email_verification_expires=None,
            email_verification_sent_at=None,
            last_seen_at=now,
            last_login_at=now,
            updated_at=now,
        )
        if profile.picture:
            fields["image"] = profile.picture
        if name:
            fields["name"] = name
        user_store.patch(db, user.id, **fields)
        db.commit()
        logger.info("google_login_linked", user_id=str(user.id))
        return user, False

    user = User(
        email=email,
        name=name or email.split("@", 1)[0][:NAME_MAX_LENGTH],
        image=profile.picture,
        provider=AuthProvider.GOOGLE,
        google_id=profile.sub,
        is_email_verified=True,
        created_at=now,
        updated_at=now,
        last_seen_at=now,
        last_login_at=now,
    )
    try:
        user_store.insert(db, user)
    except ConflictError:
        # Concurrent first sign-in won the insert.
        existing = user_store.find_by_google_id(db, profile.sub)
        if existing is None:
            raise
        return existing, False
    db.commit()
    logger.info("google_user_created", user_id=str(user.id), email_domain=email_domain(email))
    return user, True
