"""Celery configuration for background email delivery"""
from celery import Celery

from app.core.config import settings


def create_celery_app():
    celery = Celery(
        "matrimony",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["app.services.notification_service"],
    )

    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_ignore_result=True,
        task_time_limit=settings.NOTIFICATION_TASK_TIME_LIMIT,
        task_soft_time_limit=max(1, settings.NOTIFICATION_TASK_TIME_LIMIT - 10),
        worker_concurrency=settings.NOTIFICATION_WORKERS,
        worker_prefetch_multiplier=1,
        worker_max_tasks_per_child=100,
    )

    return celery


celery = create_celery_app()
