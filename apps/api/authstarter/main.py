from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from authstarter.api.dev import router as dev_router
from authstarter.api.errors import request_validation_handler, service_error_handler
from authstarter.api.v1.router import router as v1_router
from authstarter.core.config import check_required_settings, settings
from authstarter.core.logging import configure_logging
from authstarter.db import init_db
from authstarter.middleware.rate_limit import RateLimitMiddleware
from authstarter.middleware.request_id import RequestIdMiddleware
from authstarter.middleware.security_headers import SecurityHeadersMiddleware
from authstarter.services.exceptions import ServiceError

configure_logging()
check_required_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="authstarter API", lifespan=lifespan)

# Starlette runs the LAST added middleware FIRST (outermost).
# RequestId + SecurityHeaders wrap CORS preflight and rate-limit responses too;
# RateLimit sits closest to the app.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/")
def root():
    return {"name": "authstarter API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(v1_router, prefix="/v1")

if settings.dev_routes_enabled:
    app.include_router(dev_router)
