from enum import Enum


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    NOT_FOUND = "NOT_FOUND"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    INVALID_CODE = "INVALID_CODE"
    INVALID_RESET_CODE = "INVALID_RESET_CODE"
    CODE_EXPIRED = "CODE_EXPIRED"
    EMAIL_DELIVERY_FAILED = "EMAIL_DELIVERY_FAILED"
    INVALID_GOOGLE_TOKEN = "INVALID_GOOGLE_TOKEN"
    INVALID_GOOGLE_USER = "INVALID_GOOGLE_USER"
    GOOGLE_AUTH_ERROR = "GOOGLE_AUTH_ERROR"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
