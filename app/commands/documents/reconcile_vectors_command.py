"""Command to retry vector upserts that were never confirmed."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AppError
from app.services.chunk_indexer import ChunkIndexer
from app.services.document_service import DocumentService


class ReconcileVectorsCommand:
    def __init__(self, db: AsyncSession, indexer: ChunkIndexer) -> None:
        self.db = db
        self.indexer = indexer
        self.logger = logging.getLogger(__name__)

    async def execute(self, limit: int = 500) -> int:
        """
        Re-index chunks with a NULL vector_id, one document at a time.

        A failing document is logged and left pending for the next run.

        Returns:
            int: Number of chunks confirmed in this run
        """
        documents = DocumentService(self.db)
        pending = await documents.get_pending_chunks(limit=limit)
        confirmed = 0
        for document_id, chunks in pending.items():
            document = await documents.get_document(document_id)
            if document is None:
                continue
            try:
                await self.indexer.index_chunks(document.filename, chunks)
            except AppError as e:
                self.logger.warning(
                    "Reconciliation failed for document %s: %s (%s)",
                    document_id,
                    e.message,
                    e.details,
                )
                continue
            await documents.confirm_vectors(chunks)
            confirmed += len(chunks)

        if confirmed:
            self.logger.info("Reconciled %d pending chunks", confirmed)
        return confirmed
