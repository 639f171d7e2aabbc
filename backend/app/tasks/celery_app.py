"""Celery application configuration and beat schedule."""

from celery import Celery
from celery.schedules import crontab

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "travio",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.tasks.match_tasks",
        "app.tasks.trip_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    task_track_started=True,
    task_time_limit=600,
    task_soft_time_limit=540,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

celery_app.conf.beat_schedule = {
    "expire-stale-matches": {
        "task": "app.tasks.match_tasks.expire_stale_matches",
        "schedule": crontab(minute=0),
    },
    "rescore-pending-matches": {
        "task": "app.tasks.match_tasks.rescore_pending_matches",
        "schedule": crontab(minute=30, hour=3),
    },
    "geocode-pending-trips": {
        "task": "app.tasks.trip_tasks.geocode_pending_trips",
        "schedule": crontab(minute="*/15"),
    },
}
