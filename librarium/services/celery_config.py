from celery import Celery
from celery.schedules import crontab

from librarium.config import config

celery_app = Celery("librarium", include=["librarium.services.library_tasks"])

celery_app.conf.update(
    broker_url=config.CELERY_BROKER_URL,
    task_routes={"librarium.services.library_tasks.*": {"queue": "default"}},
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "expire_pending_reservations": {
            "task": "librarium.services.library_tasks.expire_pending_reservations",
            "schedule": crontab(minute=0, hour=0),
        },
    },
)
