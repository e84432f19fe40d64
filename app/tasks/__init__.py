# Import celery app first
from app.infra.celery_app import celery_app

# Initialize logging configuration for Celery workers
from app.infra.logging_config import LoggingConfig
from app.tasks.inactivity_sweep_task import sweep_inactive_conversations_task
from app.tasks.vector_reconcile_task import reconcile_pending_vectors_task

LoggingConfig()  # Initialize logging

__all__ = [
    "celery_app",
    "reconcile_pending_vectors_task",
    "sweep_inactive_conversations_task",
]
