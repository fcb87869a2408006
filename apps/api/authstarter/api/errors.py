from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authstarter.services.error_codes import ErrorCode
from authstarter.services.exceptions import (
    AuthenticationError,
    CodeRejectedError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    UpstreamError,
    ValidationError,
)


def status_for_service_error(err: ServiceError) -> int:
    if isinstance(err, NotFoundError):
        return 404
    if isinstance(err, PermissionDeniedError):
        return 403
    if isinstance(err, ConflictError):
        return 409
    if isinstance(err, ValidationError):
        return 422
    if isinstance(err, AuthenticationError):
        return 401
    if isinstance(err, CodeRejectedError):
        return 400
    if isinstance(err, UpstreamError):
        return 503 if err.code == ErrorCode.UPSTREAM_UNAVAILABLE.value else 502
    return 500


def error_body(code: str, message: str) -> dict:
    return {"success": False, "error": code, "message": message}


async def service_error_handler(request: Request, err: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for_service_error(err),
        content=error_body(err.code, err.message),
    )


async def request_validation_handler(request: Request, err: RequestValidationError) -> JSONResponse:
    errors = err.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f"{field}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=422,
        content=error_body(ErrorCode.INVALID_INPUT.value, message),
    )
