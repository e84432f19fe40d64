"""Document and chunk persistence for the knowledge base."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.document import Document, DocumentChunk
from app.services.chunker import TextChunk


class DocumentService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_document(
        self,
        filename: str,
        content_type: str,
        size: int,
        chunks: Sequence[TextChunk],
    ) -> Tuple[Document, List[DocumentChunk]]:
        """Insert the document and every chunk in one transaction. vector_id starts NULL."""
        document = Document(
            filename=filename,
            content_type=content_type,
            size=size,
            total_chunks=len(chunks),
        )
        self.db.add(document)
        await self.db.flush()
        rows = [
            DocumentChunk(
                document_id=document.id,
                chunk_index=chunk.index,
                content=chunk.content,
            )
            for chunk in chunks
        ]
        self.db.add_all(rows)
        await self.db.commit()
        return document, rows

    async def get_document(self, document_id: UUID) -> Optional[Document]:
        return await self.db.get(Document, document_id)

    async def get_document_with_chunks(self, document_id: UUID) -> Optional[Document]:
        result = await self.db.execute(
            select(Document)
            .where(Document.id == document_id)
            .options(selectinload(Document.chunks))
        )
        return result.scalar_one_or_none()

    async def get_documents(
        self, skip: int = 0, limit: Optional[int] = 100
    ) -> List[Document]:
        """Newest first; limit=None returns every document."""
        result = await self.db.execute(
            select(Document).order_by(Document.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_documents(self) -> int:
        result = await self.db.execute(select(func.count(Document.id)))
        return int(result.scalar_one())

    async def confirm_vectors(self, chunks: Sequence[DocumentChunk]) -> None:
        """Record that the vector index accepted these chunks."""
        for chunk in chunks:
            chunk.vector_id = str(chunk.id)
        await self.db.commit()

    async def get_pending_chunks(self, limit: int = 500) -> Dict[UUID, List[DocumentChunk]]:
        """Chunks whose vector upsert was never confirmed, grouped by document."""
        result = await self.db.execute(
            select(DocumentChunk)
            .where(DocumentChunk.vector_id.is_(None))
            .order_by(DocumentChunk.document_id, DocumentChunk.chunk_index)
            .limit(limit)
        )
        grouped: Dict[UUID, List[DocumentChunk]] = defaultdict(list)
        for chunk in result.scalars().all():
            grouped[chunk.document_id].append(chunk)
        return dict(grouped)

    async def delete_document(self, document: Document) -> None:
        """Remove chunk rows and the document row. Vectors must already be gone."""
        await self.db.execute(
            delete(DocumentChunk).where(DocumentChunk.document_id == document.id)
        )
        await self.db.delete(document)
        await self.db.commit()
