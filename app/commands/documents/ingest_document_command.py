"""Command to turn an uploaded file into searchable knowledge-base chunks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.text_extraction import extract_text
from app.core.errors import to_app_error
from app.exceptions import AppError, EmptyDocumentError, ExtractionError
from app.services.chunk_indexer import ChunkIndexer
from app.services.chunker import chunk_text
from app.services.document_service import DocumentService


@dataclass
class IngestResult:
    document_id: UUID
    filename: str
    total_chunks: int
    size: int


class IngestDocumentCommand:
    """
    extract -> chunk -> persist document and chunks -> embed -> upsert -> confirm.

    Rows are committed before any vector work. If embedding or upsert fails the
    chunks keep a NULL vector_id and the reconciliation task retries them.
    """

    def __init__(self, db: AsyncSession, indexer: ChunkIndexer) -> None:
        self.db = db
        self.indexer = indexer
        self.logger = logging.getLogger(__name__)

    async def execute(
        self, content: bytes, filename: str, content_type: str, size: int
    ) -> IngestResult:
        """
        Ingest one document.

        Raises:
            ExtractionError: Text could not be extracted, or it was blank (not retryable)
            EmptyDocumentError: Chunking produced nothing (not retryable)
            EmbeddingServiceError, VectorIndexError: Vector work failed (retryable)
            ServiceConnectivityError: The database is unreachable (retryable)
            InternalServiceError: Anything else (retryable)
        """
        try:
            return await self._execute(content, filename, content_type, size)
        except AppError:
            raise
        except Exception as e:
            await self.db.rollback()
            self.logger.exception("Ingestion failed for %s", filename)
            raise to_app_error(e) from e

    async def _execute(
        self, content: bytes, filename: str, content_type: str, size: int
    ) -> IngestResult:
        try:
            text = await extract_text(content, content_type)
        except Exception as e:
            self.logger.warning("Text extraction failed for %s: %s", filename, e)
            raise ExtractionError(
                "Failed to extract text from file", details=str(e)
            ) from e
        if not text or not text.strip():
            raise ExtractionError(
                "Could not extract text from the document", details=filename
            )

        chunks = chunk_text(text)
        if not chunks:
            raise EmptyDocumentError(filename)

        documents = DocumentService(self.db)
        document, rows = await documents.create_document(
            filename=filename,
            content_type=content_type,
            size=size,
            chunks=chunks,
        )
        self.logger.info(
            "Stored document %s (%s) with %d chunks", document.id, filename, len(rows)
        )

        await self.indexer.index_chunks(filename, rows)
        await documents.confirm_vectors(rows)

        return IngestResult(
            document_id=document.id,
            filename=filename,
            total_chunks=len(rows),
            size=size,
        )
