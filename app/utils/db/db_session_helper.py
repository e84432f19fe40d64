"""Session scope for Celery tasks, which run each job in a fresh event loop."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db import build_engine, build_session_factory


@asynccontextmanager
async def db_session() -> AsyncIterator[AsyncSession]:
    """
    Yield a session bound to a NullPool engine that is disposed on exit.

    Pooled connections are tied to the loop that opened them, so tasks that call
    asyncio.run per invocation must not share the API engine.
    """
    engine = build_engine(get_settings().database_url, pooled=False)
    factory = build_session_factory(engine)
    try:
        async with factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
    finally:
        await engine.dispose()
