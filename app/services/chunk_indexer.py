"""Embed chunks in passage mode and upsert them into the vector index."""

from __future__ import annotations

from typing import Sequence

from app.adapters.base import BaseEmbeddingProvider, BaseVectorIndex, VectorRecord
from app.models.document import DocumentChunk


class ChunkIndexer:
    def __init__(self, embeddings: BaseEmbeddingProvider, index: BaseVectorIndex) -> None:
        self.embeddings = embeddings
        self.index = index

    async def index_chunks(self, filename: str, chunks: Sequence[DocumentChunk]) -> None:
        """
        One batched embedding call for all chunks, then one upsert. Vector ids are
        chunk ids, so re-indexing the same chunk overwrites it.
        """
        if not chunks:
            return
        vectors = await self.embeddings.embed([c.content for c in chunks], mode="passage")
        records = [
            VectorRecord(
                id=str(chunk.id),
                values=vector,
                metadata={
                    "text": chunk.content,
                    "document_id": str(chunk.document_id),
                    "chunk_index": chunk.chunk_index,
                    "filename": filename,
                },
            )
            for chunk, vector in zip(chunks, vectors)
        ]
        await self.index.upsert(records)
