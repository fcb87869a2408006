from __future__ import annotations

import uuid

import structlog
from kombu.exceptions import OperationalError

from authstarter.core.config import settings
from authstarter.worker.celery_app import celery_app

logger = structlog.get_logger()

VERIFICATION = "verification"
PASSWORD_RESET = "password_reset"


def enqueue_email_retry(kind: str, user_id: uuid.UUID) -> bool:
    """Queue a later delivery attempt for the user's outstanding code."""
    if not settings.email_retry_enabled:
        return False
    try:
        celery_app.send_task("deliver_auth_email", args=[kind, str(user_id)])
    except OperationalError:
        logger.exception("email_retry_enqueue_failed", kind=kind, user_id=str(user_id))
        return False
    logger.info("email_retry_enqueued", kind=kind, user_id=str(user_id))
    return True
