"""Command to remove a document from the knowledge base."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.base import BaseVectorIndex
from app.exceptions import DocumentNotFoundError
from app.services.document_service import DocumentService


class DeleteDocumentCommand:
    """Vectors are deleted before rows, so a failed vector delete can simply be retried."""

    def __init__(self, db: AsyncSession, index: BaseVectorIndex) -> None:
        self.db = db
        self.index = index
        self.logger = logging.getLogger(__name__)

    async def execute(self, document_id: UUID) -> dict:
        """
        Delete the document, its chunks and its vectors.

        Returns:
            dict: {"filename": ...} of the deleted document

        Raises:
            DocumentNotFoundError: Unknown id
            VectorIndexError: Vector deletion failed; relational rows are untouched
        """
        documents = DocumentService(self.db)
        document = await documents.get_document(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)

        filename = document.filename
        await self.index.delete_by_document(str(document.id))
        await documents.delete_document(document)
        self.logger.info("Deleted document %s (%s)", document_id, filename)
        return {"filename": filename}
