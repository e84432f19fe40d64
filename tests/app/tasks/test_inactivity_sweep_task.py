"""Tests for the Celery inactivity sweep task wrapper."""

from redis.exceptions import LockError

from app.infra.celery_app import celery_app
from app.services.inactivity_sweeper import SweepReport
from app.tasks import inactivity_sweep_task


class FakeLock:
    def __init__(self, acquired=True, expired=False):
        self.acquired = acquired
        self.expired = expired
        self.released = False

    def acquire(self, blocking=True):
        return self.acquired

    def release(self):
        if self.expired:
            raise LockError("lock expired")
        self.released = True


class FakeRedis:
    def __init__(self, lock):
        self._lock = lock
        self.lock_args = None

    def lock(self, key, timeout=None):
        self.lock_args = (key, timeout)
        return self._lock


def test_beat_schedule_registers_both_jobs():
    schedule = celery_app.conf.beat_schedule
    assert (
        schedule["sweep-inactive-conversations"]["task"]
        == "app.tasks.inactivity_sweep_task.sweep_inactive_conversations_task"
    )
    assert (
        schedule["reconcile-pending-vectors"]["task"]
        == "app.tasks.vector_reconcile_task.reconcile_pending_vectors_task"
    )


def test_skips_tick_while_previous_sweep_holds_lock(monkeypatch):
    lock = FakeLock(acquired=False)
    monkeypatch.setattr(inactivity_sweep_task, "get_redis", lambda: FakeRedis(lock))

    async def must_not_run():
        raise AssertionError("sweep should not run")

    monkeypatch.setattr(inactivity_sweep_task, "_run_sweep", must_not_run)

    assert inactivity_sweep_task.sweep_inactive_conversations_task.run() is None
    assert lock.released is False


def test_runs_sweep_and_releases_lock(monkeypatch):
    lock = FakeLock()
    redis = FakeRedis(lock)
    monkeypatch.setattr(inactivity_sweep_task, "get_redis", lambda: redis)

    async def fake_sweep():
        return SweepReport(scanned=5, warned=1, closed=2)

    monkeypatch.setattr(inactivity_sweep_task, "_run_sweep", fake_sweep)

    result = inactivity_sweep_task.sweep_inactive_conversations_task.run()

    assert result == {"scanned": 5, "warned": 1, "closed": 2, "cleared": 0, "failed": 0}
    assert lock.released is True
    assert redis.lock_args[0] == inactivity_sweep_task.SWEEP_LOCK_KEY


def test_expired_lock_does_not_fail_the_task(monkeypatch):
    lock = FakeLock(expired=True)
    monkeypatch.setattr(inactivity_sweep_task, "get_redis", lambda: FakeRedis(lock))

    async def fake_sweep():
        return SweepReport()

    monkeypatch.setattr(inactivity_sweep_task, "_run_sweep", fake_sweep)

    assert inactivity_sweep_task.sweep_inactive_conversations_task.run()["scanned"] == 0
