import uuid

from celery.utils.log import get_task_logger
from sqlalchemy.orm import Session

from authstarter.auth.codes import is_expired
from authstarter.core.config import settings
from authstarter.db import SessionLocal
from authstarter.mail.factory import get_email_dispatcher
from authstarter.models.user import PendingVerification
from authstarter.services import user_store
from authstarter.services.exceptions import UpstreamError
from authstarter.worker.celery_app import celery_app
from authstarter.worker.outbox import PASSWORD_RESET, VERIFICATION

logger = get_task_logger(__name__)


@celery_app.task(
    name="deliver_auth_email",
    autoretry_for=(UpstreamError,),
    retry_backoff=True,
    retry_backoff_max=600,
    retry_kwargs={"max_retries": settings.email_retry_max},
)
def deliver_auth_email(kind: str, user_id: str) -> dict:
    db: Session = SessionLocal()
    try:
        user = user_store.get(db, uuid.UUID(user_id))
        if user is None:
            logger.info("deliver_auth_email skipped, user gone user_id=%s", user_id)
            return {"status": "skipped", "reason": "user_not_found"}

        dispatcher = get_email_dispatcher()
        if kind == VERIFICATION:
            state = user.verification_state
            if not isinstance(state, PendingVerification) or not state.code or is_expired(state.expires_at):
                return {"status": "skipped", "reason": "no_pending_code"}
            message_id = dispatcher.send_verification(user.email, state.code, user.name)
        elif kind == PASSWORD_RESET:
            reset = user.reset_state
            if reset is None or is_expired(reset.expires_at):
                return {"status": "skipped", "reason": "no_pending_code"}
            message_id = dispatcher.send_password_reset(user.email, reset.code, user.name)
        else:
            raise ValueError(f"unknown email kind: {kind}")

        logger.info("deliver_auth_email sent kind=%s user_id=%s", kind, user_id)
        return {"status": "sent", "message_id": message_id}
    finally:
        db.close()
