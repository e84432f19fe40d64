"""Celery application and beat schedule for background jobs."""

from __future__ import annotations

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "shopdesk",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.tasks.inactivity_sweep_task",
        "app.tasks.vector_reconcile_task",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_ignore_result=True,
    worker_prefetch_multiplier=1,
    beat_schedule={
        "sweep-inactive-conversations": {
            "task": "app.tasks.inactivity_sweep_task.sweep_inactive_conversations_task",
            "schedule": float(settings.inactivity_sweep_interval_seconds),
            "options": {"expires": float(settings.inactivity_sweep_interval_seconds)},
        },
        "reconcile-pending-vectors": {
            "task": "app.tasks.vector_reconcile_task.reconcile_pending_vectors_task",
            "schedule": float(settings.vector_reconcile_interval_seconds),
        },
    },
)
