"""Knowledge-base documents API: upload, list, inspect, stats and delete."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi_pagination import Page, Params, create_page
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.base import BaseVectorIndex
from app.commands.documents.delete_document_command import DeleteDocumentCommand
from app.commands.documents.ingest_document_command import IngestDocumentCommand
from app.db import get_db
from app.exceptions import DocumentNotFoundError, ValidationError
from app.routers.utils.dependencies import get_chunk_indexer, get_vector_index
from app.schemas.document import (
    DocumentDeleteResponse,
    DocumentDetailRead,
    DocumentRead,
    DocumentStatsEntry,
    DocumentUploadResponse,
    KnowledgeBaseStats,
)
from app.services.chunk_indexer import ChunkIndexer
from app.services.document_service import DocumentService

documents_router = APIRouter(prefix="/documents", tags=["Documents"])

ALLOWED_DOCUMENT_TYPES = ("application/pdf", "text/plain", "text/markdown")


@documents_router.post("/upload", response_model=DocumentUploadResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    indexer: ChunkIndexer = Depends(get_chunk_indexer),
) -> DocumentUploadResponse:
    """Extract, chunk, embed and index a document."""
    if not file.filename:
        raise ValidationError("No file uploaded")
    content_type = file.content_type or ""
    if content_type not in ALLOWED_DOCUMENT_TYPES:
        raise ValidationError("Invalid file type. Allowed: PDF, TXT, MD")

    content = await file.read()
    result = await IngestDocumentCommand(db, indexer).execute(
        content=content,
        filename=file.filename,
        content_type=content_type,
        size=len(content),
    )
    return DocumentUploadResponse(
        document_id=result.document_id,
        filename=result.filename,
        total_chunks=result.total_chunks,
        size=result.size,
    )


@documents_router.get("", response_model=Page[DocumentRead])
async def list_documents(
    params: Params = Depends(),
    db: AsyncSession = Depends(get_db),
) -> Page[DocumentRead]:
    """List documents, newest first."""
    svc = DocumentService(db)
    documents = await svc.get_documents(
        skip=(params.page - 1) * params.size, limit=params.size
    )
    total = await svc.count_documents()
    items = [DocumentRead.model_validate(d) for d in documents]
    return create_page(items, total=total, params=params)


@documents_router.get("/stats", response_model=KnowledgeBaseStats)
async def get_knowledge_base_stats(
    db: AsyncSession = Depends(get_db),
    index: BaseVectorIndex = Depends(get_vector_index),
) -> KnowledgeBaseStats:
    documents = await DocumentService(db).get_documents(limit=None)
    return KnowledgeBaseStats(
        total_documents=len(documents),
        total_vectors=await index.count(),
        documents=[
            DocumentStatsEntry(filename=d.filename, chunks=d.total_chunks)
            for d in documents
        ],
    )


@documents_router.get("/{document_id}", response_model=DocumentDetailRead)
async def get_document(
    document_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DocumentDetailRead:
    """Document with its chunks in order."""
    document = await DocumentService(db).get_document_with_chunks(document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)
    return DocumentDetailRead.model_validate(document)


@documents_router.delete("/{document_id}", response_model=DocumentDeleteResponse)
async def delete_document(
    document_id: UUID,
    db: AsyncSession = Depends(get_db),
    index: BaseVectorIndex = Depends(get_vector_index),
) -> DocumentDeleteResponse:
    """Remove the document's vectors, then its rows."""
    result = await DeleteDocumentCommand(db, index).execute(document_id)
    return DocumentDeleteResponse(filename=result["filename"])
