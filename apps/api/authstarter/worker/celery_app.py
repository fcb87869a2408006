from celery import Celery

from authstarter.core.config import settings

celery_app = Celery(
    "authstarter",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["authstarter.worker.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    task_acks_late=True,
    broker_connection_retry_on_startup=True,
)
