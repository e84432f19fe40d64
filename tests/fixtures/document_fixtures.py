"""Fixtures for knowledge-base documents and indexed vectors."""

import pytest

from app.adapters.base import VectorRecord
from app.services.chunker import TextChunk
from app.services.document_service import DocumentService


@pytest.fixture(scope="function")
async def setup_document(db, fake_vector_index):
    """
    Document with two chunks whose vectors are already in the fake index.
    Returns (document, chunks).
    """
    svc = DocumentService(db)
    document, chunks = await svc.create_document(
        filename="shipping.txt",
        content_type="text/plain",
        size=120,
        chunks=[
            TextChunk(content="Standard shipping takes 3-5 business days", index=0),
            TextChunk(content="Express shipping arrives the next business day", index=1),
        ],
    )
    await fake_vector_index.upsert(
        [
            VectorRecord(
                id=str(chunk.id),
                values=[1.0] * 8,
                metadata={
                    "text": chunk.content,
                    "document_id": str(document.id),
                    "chunk_index": chunk.chunk_index,
                    "filename": document.filename,
                },
            )
            for chunk in chunks
        ]
    )
    await svc.confirm_vectors(chunks)
    return document, chunks


@pytest.fixture(scope="function")
def sentence_text():
    """Fifty short sentences; long enough to need several chunks."""
    return " ".join(
        f"Sentence number {i} explains one part of the returns policy." for i in range(50)
    )
