"""Celery application for ConvoHub background tasks.

Broker and result backend come from settings. Tests set
CELERY_TASK_ALWAYS_EAGER=true so tasks run inline on .delay().
"""

from celery import Celery

from ..config import get_settings


def create_celery_app() -> Celery:
    settings = get_settings()

    app = Celery(
        "convohub",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "convohub.workers.mail_tasks",
            "convohub.workers.document_tasks",
        ],
    )
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
        task_eager_propagates=settings.CELERY_TASK_ALWAYS_EAGER,
    )
    return app


celery_app = create_celery_app()
