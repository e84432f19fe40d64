"""Celery beat task driving the inactivity warn/close lifecycle."""

from __future__ import annotations

import asyncio
from dataclasses import asdict
from typing import Optional

from redis.exceptions import LockError

from app.config import get_settings
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.infra.redis_client import get_redis
from app.services.inactivity_sweeper import InactivitySweeper, SweepReport
from app.utils.db.db_session_helper import db_session

logger = get_logger("inactivity_sweep")

SWEEP_LOCK_KEY = "shopdesk:lock:inactivity-sweep"


async def _run_sweep() -> SweepReport:
    async with db_session() as db:
        return await InactivitySweeper(db).sweep()


@celery_app.task(name="app.tasks.inactivity_sweep_task.sweep_inactive_conversations_task")
def sweep_inactive_conversations_task() -> Optional[dict]:
    """
    Run one sweep. Ticks never overlap: if the previous sweep still holds the
    lock, this tick is skipped. The lock expires on its own if a worker dies.
    """
    interval = get_settings().inactivity_sweep_interval_seconds
    lock = get_redis().lock(SWEEP_LOCK_KEY, timeout=max(120, interval * 4))
    if not lock.acquire(blocking=False):
        logger.info("Previous inactivity sweep still running; skipping tick")
        return None
    try:
        report = asyncio.run(_run_sweep())
    finally:
        try:
            lock.release()
        except LockError:
            logger.warning("Inactivity sweep lock expired before release")
    return asdict(report)
