"""Tests for document ingestion, deletion and vector reconciliation."""

from uuid import uuid4

import pytest

from app.commands.documents.delete_document_command import DeleteDocumentCommand
from app.commands.documents.ingest_document_command import IngestDocumentCommand
from app.commands.documents.reconcile_vectors_command import ReconcileVectorsCommand
from app.exceptions import (
    DocumentNotFoundError,
    EmbeddingServiceError,
    EmptyDocumentError,
    ExtractionError,
    VectorIndexError,
)
from app.services.document_service import DocumentService


async def _ingest(db, chunk_indexer, text, filename="faq.txt", content_type="text/plain"):
    content = text.encode("utf-8")
    return await IngestDocumentCommand(db, chunk_indexer).execute(
        content=content,
        filename=filename,
        content_type=content_type,
        size=len(content),
    )


async def test_ingest_single_chunk(db, chunk_indexer, fake_vector_index, fake_embeddings):
    text = ("word " * 240).strip()

    result = await _ingest(db, chunk_indexer, text)

    assert result.total_chunks == 1
    assert result.size == len(text)
    document = await DocumentService(db).get_document_with_chunks(result.document_id)
    assert document.total_chunks == 1
    [chunk] = document.chunks
    assert chunk.content == text
    assert chunk.vector_id == str(chunk.id)

    record = fake_vector_index.records[str(chunk.id)]
    assert record.metadata == {
        "text": text,
        "document_id": str(document.id),
        "chunk_index": 0,
        "filename": "faq.txt",
    }
    assert [mode for _, mode in fake_embeddings.calls] == ["passage"]


async def test_ingest_many_sentences(db, chunk_indexer, fake_vector_index, fake_embeddings, sentence_text):
    result = await _ingest(db, chunk_indexer, sentence_text, filename="returns.md", content_type="text/markdown")

    assert result.total_chunks > 1
    document = await DocumentService(db).get_document_with_chunks(result.document_id)
    assert [c.chunk_index for c in document.chunks] == list(range(result.total_chunks))
    assert all(c.vector_id is not None for c in document.chunks)
    assert len(fake_vector_index.records) == result.total_chunks
    # One batched call for every chunk.
    assert len(fake_embeddings.calls) == 1
    assert len(fake_embeddings.calls[0][0]) == result.total_chunks


async def test_ingest_blank_text_fails_extraction(db, chunk_indexer):
    with pytest.raises(ExtractionError) as exc_info:
        await _ingest(db, chunk_indexer, "   \n\t ")
    assert exc_info.value.retryable is False
    assert await DocumentService(db).count_documents() == 0


async def test_ingest_terminators_only_yields_no_chunks(db, chunk_indexer, fake_embeddings):
    with pytest.raises(EmptyDocumentError) as exc_info:
        await _ingest(db, chunk_indexer, "...!!!???")
    assert exc_info.value.status_code == 422
    assert exc_info.value.retryable is False
    assert fake_embeddings.calls == []
    assert await DocumentService(db).count_documents() == 0


async def test_ingest_unreadable_pdf_fails_extraction(db, chunk_indexer):
    with pytest.raises(ExtractionError):
        await IngestDocumentCommand(db, chunk_indexer).execute(
            content=b"this is not a pdf",
            filename="broken.pdf",
            content_type="application/pdf",
            size=17,
        )
    assert await DocumentService(db).count_documents() == 0


async def test_embedding_failure_leaves_chunks_pending(db, chunk_indexer, fake_embeddings, sentence_text):
    fake_embeddings.fail = True

    with pytest.raises(EmbeddingServiceError) as exc_info:
        await _ingest(db, chunk_indexer, sentence_text)
    assert exc_info.value.retryable is True

    svc = DocumentService(db)
    assert await svc.count_documents() == 1
    pending = await svc.get_pending_chunks()
    assert len(pending) == 1
    [chunks] = pending.values()
    assert all(c.vector_id is None for c in chunks)


async def test_reconcile_indexes_pending_chunks(
    db, chunk_indexer, fake_embeddings, fake_vector_index, sentence_text
):
    fake_embeddings.fail = True
    with pytest.raises(EmbeddingServiceError):
        await _ingest(db, chunk_indexer, sentence_text)
    fake_embeddings.fail = False

    confirmed = await ReconcileVectorsCommand(db, chunk_indexer).execute()

    svc = DocumentService(db)
    assert confirmed > 0
    assert confirmed == len(fake_vector_index.records)
    assert await svc.get_pending_chunks() == {}


async def test_reconcile_keeps_failed_documents_pending(
    db, chunk_indexer, fake_embeddings, fake_vector_index, sentence_text
):
    fake_vector_index.fail_upsert = True
    with pytest.raises(VectorIndexError):
        await _ingest(db, chunk_indexer, sentence_text)

    confirmed = await ReconcileVectorsCommand(db, chunk_indexer).execute()

    assert confirmed == 0
    assert len(await DocumentService(db).get_pending_chunks()) == 1


async def test_delete_removes_vectors_then_rows(db, fake_vector_index, setup_document):
    document, _ = setup_document

    result = await DeleteDocumentCommand(db, fake_vector_index).execute(document.id)

    assert result == {"filename": "shipping.txt"}
    assert fake_vector_index.deleted_documents == [str(document.id)]
    assert fake_vector_index.records == {}
    assert await DocumentService(db).get_document(document.id) is None


async def test_delete_unknown_document(db, fake_vector_index):
    with pytest.raises(DocumentNotFoundError):
        await DeleteDocumentCommand(db, fake_vector_index).execute(uuid4())


async def test_delete_keeps_rows_when_vector_delete_fails(db, fake_vector_index, setup_document):
    document, chunks = setup_document
    fake_vector_index.fail_delete = True

    with pytest.raises(VectorIndexError):
        await DeleteDocumentCommand(db, fake_vector_index).execute(document.id)

    remaining = await DocumentService(db).get_document_with_chunks(document.id)
    assert remaining is not None
    assert len(remaining.chunks) == len(chunks)
