"""Celery beat task that retries unconfirmed vector upserts."""

from __future__ import annotations

import asyncio

from app.adapters.embedding_client import build_embedding_client_from_env
from app.adapters.vector_index import build_vector_index_from_env
from app.commands.documents.reconcile_vectors_command import ReconcileVectorsCommand
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.services.chunk_indexer import ChunkIndexer
from app.utils.db.db_session_helper import db_session

logger = get_logger("vector_reconcile")


async def _run_reconcile(limit: int) -> int:
    embeddings = build_embedding_client_from_env()
    index = build_vector_index_from_env()
    try:
        async with db_session() as db:
            command = ReconcileVectorsCommand(db, ChunkIndexer(embeddings, index))
            return await command.execute(limit=limit)
    finally:
        await embeddings.aclose()
        await index.close()


@celery_app.task(name="app.tasks.vector_reconcile_task.reconcile_pending_vectors_task")
def reconcile_pending_vectors_task(limit: int = 500) -> int:
    """Confirm chunks whose vectors never reached the index."""
    return asyncio.run(_run_reconcile(limit))
