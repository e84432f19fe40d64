"""Pydantic schemas for the knowledge-base document API."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class DocumentRead(BaseModel):
    id: UUID
    filename: str
    content_type: str
    size: int
    total_chunks: int
    created_at: datetime

    model_config = {"from_attributes": True}


class DocumentChunkRead(BaseModel):
    id: UUID
    chunk_index: int
    content: str
    vector_id: Optional[str] = None

    model_config = {"from_attributes": True}


class DocumentDetailRead(DocumentRead):
    chunks: List[DocumentChunkRead]


class DocumentUploadResponse(BaseModel):
    success: bool = True
    document_id: UUID
    filename: str
    total_chunks: int
    size: int


class DocumentDeleteResponse(BaseModel):
    success: bool = True
    filename: str


class DocumentStatsEntry(BaseModel):
    filename: str
    chunks: int


class KnowledgeBaseStats(BaseModel):
    total_documents: int
    total_vectors: int
    documents: List[DocumentStatsEntry]
