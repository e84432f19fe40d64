"""
Collaborator interfaces.

The core talks to embedding, vector search and blob storage only through these
contracts, so tests can swap in fakes and deployments can swap providers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Sequence

EmbeddingMode = Literal["passage", "query"]


@dataclass
class VectorRecord:
    id: str
    values: List[float]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class VectorMatch:
    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class StoredBlob:
    url: str
    key: Optional[str]
    file_name: str
    file_type: str
    file_size: int


class BaseEmbeddingProvider(ABC):
    @abstractmethod
    async def embed(self, texts: Sequence[str], mode: EmbeddingMode) -> List[List[float]]:
        """Return one vector per text, in input order. Raise EmbeddingServiceError on failure."""
        ...


class BaseVectorIndex(ABC):
    @abstractmethod
    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        """Insert or overwrite vectors by id."""
        ...

    @abstractmethod
    async def query(self, vector: Sequence[float], top_k: int) -> List[VectorMatch]:
        """Return up to top_k nearest vectors with similarity scores and metadata."""
        ...

    @abstractmethod
    async def delete_by_document(self, document_id: str) -> None:
        """Remove every vector whose metadata document_id matches."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Total number of stored vectors."""
        ...

    async def has_vectors(self) -> bool:
        return await self.count() > 0


class BaseBlobStorage(ABC):
    @abstractmethod
    async def upload(self, content: bytes, file_name: str, content_type: str) -> StoredBlob:
        """Store bytes and return a public URL plus the provider key."""
        ...
