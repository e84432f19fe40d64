"""Qdrant-backed vector index for knowledge-base chunks."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    MatchValue,
    PayloadSchemaType,
    PointStruct,
    VectorParams,
)

from app.adapters.base import BaseVectorIndex, VectorMatch, VectorRecord
from app.config import get_settings
from app.exceptions import VectorIndexError
from app.infra.logging_config import get_logger

logger = get_logger("vector_index")

MAX_QUERY_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 1.0
DOCUMENT_ID_FIELD = "document_id"


class QdrantVectorIndex(BaseVectorIndex):
    """Point ids are chunk ids; payload carries text, document_id, chunk_index and filename."""

    def __init__(
        self,
        client: AsyncQdrantClient,
        collection_name: str,
        dimension: int,
    ) -> None:
        self._client = client
        self.collection_name = collection_name
        self.dimension = dimension
        self._collection_ready = False

    async def ensure_collection(self) -> None:
        if self._collection_ready:
            return
        try:
            if not await self._client.collection_exists(self.collection_name):
                await self._client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=VectorParams(
                        size=self.dimension, distance=Distance.COSINE
                    ),
                )
                await self._client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name=DOCUMENT_ID_FIELD,
                    field_schema=PayloadSchemaType.KEYWORD,
                )
                logger.info("Created vector collection %s", self.collection_name)
        except Exception as e:
            raise VectorIndexError(
                "Vector index is unavailable", details=str(e)
            ) from e
        self._collection_ready = True

    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        if not records:
            return
        await self.ensure_collection()
        points = [
            PointStruct(id=r.id, vector=list(r.values), payload=dict(r.metadata))
            for r in records
        ]
        try:
            await self._client.upsert(
                collection_name=self.collection_name, points=points, wait=True
            )
        except Exception as e:
            raise VectorIndexError(
                "Failed to store document vectors", details=str(e)
            ) from e
        logger.info("Upserted %d vectors into %s", len(points), self.collection_name)

    async def query(self, vector: Sequence[float], top_k: int) -> List[VectorMatch]:
        last_error: Optional[Exception] = None
        for attempt in range(1, MAX_QUERY_ATTEMPTS + 1):
            try:
                response = await self._client.query_points(
                    collection_name=self.collection_name,
                    query=list(vector),
                    limit=top_k,
                    with_payload=True,
                )
                return [
                    VectorMatch(id=str(p.id), score=float(p.score), metadata=p.payload or {})
                    for p in response.points
                ]
            except Exception as e:
                last_error = e
                logger.warning(
                    "Vector query failed (attempt %d/%d): %s",
                    attempt,
                    MAX_QUERY_ATTEMPTS,
                    e,
                )
                if attempt < MAX_QUERY_ATTEMPTS:
                    await asyncio.sleep(RETRY_DELAY_SECONDS * attempt)
        raise VectorIndexError("Vector search failed", details=str(last_error))

    async def delete_by_document(self, document_id: str) -> None:
        selector = FilterSelector(
            filter=Filter(
                must=[
                    FieldCondition(
                        key=DOCUMENT_ID_FIELD, match=MatchValue(value=document_id)
                    )
                ]
            )
        )
        try:
            if not await self._client.collection_exists(self.collection_name):
                logger.info(
                    "No vector collection %s yet; nothing to delete for %s",
                    self.collection_name,
                    document_id,
                )
                return
            await self._client.delete(
                collection_name=self.collection_name,
                points_selector=selector,
                wait=True,
            )
        except Exception as e:
            raise VectorIndexError(
                "Failed to delete document vectors", details=str(e)
            ) from e
        logger.info("Deleted vectors for document %s", document_id)

    async def count(self) -> int:
        """Vector count; 0 when the index cannot be reached or does not exist yet."""
        try:
            result = await self._client.count(
                collection_name=self.collection_name, exact=True
            )
            return int(result.count)
        except Exception as e:
            logger.warning("Could not read vector count: %s", e)
            return 0

    async def close(self) -> None:
        await self._client.close()


def build_vector_index_from_env() -> QdrantVectorIndex:
    settings = get_settings()
    client = AsyncQdrantClient(
        url=settings.qdrant_url,
        api_key=settings.qdrant_api_key,
        timeout=30,
    )
    return QdrantVectorIndex(
        client=client,
        collection_name=settings.qdrant_collection,
        dimension=settings.embedding_dimension,
    )
