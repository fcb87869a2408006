from authstarter.api.v1.schemas.auth import (
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

__all__ = [
    "ApiResponse",
    "PublicProfile",
    "RegisterIn",
    "RegisterData",
    "VerifyEmailIn",
    "VerifyEmailData",
    "EmailIn",
    "ResetPasswordIn",
    "LoginIn",
    "GoogleAuthIn",
    "GoogleAuthData",
]
