"""Tests for QdrantVectorIndex against qdrant-client's in-memory mode."""

from uuid import uuid4

import pytest
from qdrant_client import AsyncQdrantClient

from app.adapters.base import VectorRecord
from app.adapters.vector_index import QdrantVectorIndex


@pytest.fixture
async def vector_index():
    index = QdrantVectorIndex(
        client=AsyncQdrantClient(location=":memory:"),
        collection_name="knowledge_base_test",
        dimension=4,
    )
    yield index
    await index.close()


def _record(document_id, chunk_index, values):
    return VectorRecord(
        id=str(uuid4()),
        values=values,
        metadata={
            "text": f"chunk {chunk_index}",
            "document_id": document_id,
            "chunk_index": chunk_index,
            "filename": "faq.txt",
        },
    )


async def test_count_is_zero_before_any_upsert(vector_index):
    assert await vector_index.count() == 0
    assert await vector_index.has_vectors() is False


async def test_delete_before_collection_exists_is_a_no_op(vector_index):
    await vector_index.delete_by_document(str(uuid4()))
    assert await vector_index.count() == 0


async def test_upsert_and_query(vector_index):
    doc = str(uuid4())
    await vector_index.upsert(
        [
            _record(doc, 0, [1.0, 0.0, 0.0, 0.0]),
            _record(doc, 1, [0.0, 1.0, 0.0, 0.0]),
        ]
    )

    matches = await vector_index.query([1.0, 0.1, 0.0, 0.0], top_k=1)

    assert await vector_index.count() == 2
    assert len(matches) == 1
    assert matches[0].metadata["chunk_index"] == 0
    assert matches[0].metadata["document_id"] == doc


async def test_upsert_same_id_overwrites(vector_index):
    record = _record(str(uuid4()), 0, [1.0, 0.0, 0.0, 0.0])
    await vector_index.upsert([record])
    await vector_index.upsert([record])
    assert await vector_index.count() == 1


async def test_delete_by_document_only_removes_that_document(vector_index):
    keep, drop = str(uuid4()), str(uuid4())
    await vector_index.upsert(
        [
            _record(keep, 0, [1.0, 0.0, 0.0, 0.0]),
            _record(drop, 0, [0.0, 1.0, 0.0, 0.0]),
            _record(drop, 1, [0.0, 0.0, 1.0, 0.0]),
        ]
    )

    await vector_index.delete_by_document(drop)

    assert await vector_index.count() == 1
    [match] = await vector_index.query([1.0, 0.0, 0.0, 0.0], top_k=5)
    assert match.metadata["document_id"] == keep
