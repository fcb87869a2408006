from __future__ import annotations

from fastapi import APIRouter

from authstarter.api.v1.schemas import (
    ApiResponse,
    EmailIn,
    GoogleAuthData,
    GoogleAuthIn,
    LoginIn,
    PublicProfile,
    RegisterData,
    RegisterIn,
    ResetPasswordIn,
    VerifyEmailData,
    VerifyEmailIn,
)
from authstarter.auth.deps import DBSession, GoogleVerifier, Mailer
from authstarter.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[RegisterData])
def register(payload: RegisterIn, db: DBSession, mailer: Mailer):
    result = auth_service.register(db, mailer, payload.email, payload.name, payload.password)
    return ApiResponse[RegisterData](
        message=result.message,
        data=RegisterData(user_id=result.user_id, email_sent=result.email_sent),
    )


@router.post("/verify-email", response_model=ApiResponse[VerifyEmailData])
def verify_email(payload: VerifyEmailIn, db: DBSession):
    result = auth_service.verify_email(db, payload.email, payload.code)
    return ApiResponse[VerifyEmailData](
        message=result.message,
        data=VerifyEmailData(already_verified=result.already_verified),
    )


@router.post("/resend-verification", response_model=ApiResponse[None])
def resend_verification(payload: EmailIn, db: DBSession, mailer: Mailer):
    message = auth_service.resend_verification(db, mailer, payload.email)
    return ApiResponse[None](message=message)


@router.post("/password-reset/request", response_model=ApiResponse[None])
def request_password_reset(payload: EmailIn, db: DBSession, mailer: Mailer):
    message = auth_service.request_password_reset(db, mailer, payload.email)
    return ApiResponse[None](message=message)


@router.post("/password-reset/confirm", response_model=ApiResponse[None])
def reset_password(payload: ResetPasswordIn, db: DBSession):
    message = auth_service.reset_password(db, payload.email, payload.code, payload.new_password)
    return ApiResponse[None](message=message)


@router.post("/login", response_model=ApiResponse[PublicProfile])
def login(payload: LoginIn, db: DBSession):
    user = auth_service.login(db, payload.email, payload.password)
    return ApiResponse[PublicProfile](
        message="Login successful",
        data=PublicProfile.model_validate(user),
    )


@router.post("/google", response_model=ApiResponse[GoogleAuthData])
def google_auth(payload: GoogleAuthIn, db: DBSession, verifier: GoogleVerifier):
    user, is_new_user = auth_service.google_auth(db, verifier, payload.credential)
    return ApiResponse[GoogleAuthData](
        message="Account created with Google" if is_new_user else "Signed in with Google",
        data=GoogleAuthData(user=PublicProfile.model_validate(user), is_new_user=is_new_user),
    )
