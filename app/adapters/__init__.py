"""External collaborators: embeddings, vector search, text extraction and blob storage."""

from app.adapters.base import (
    BaseBlobStorage,
    BaseEmbeddingProvider,
    BaseVectorIndex,
    StoredBlob,
    VectorMatch,
    VectorRecord,
)

__all__ = [
    "BaseBlobStorage",
    "BaseEmbeddingProvider",
    "BaseVectorIndex",
    "StoredBlob",
    "VectorMatch",
    "VectorRecord",
]
