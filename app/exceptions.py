"""
Application exceptions.

Every error that can reach a client carries a stable error_code, a user-safe
message, the HTTP status it maps to and whether retrying the same call can
succeed. Provider and storage error text stays in `details` and is only logged.
"""

from __future__ import annotations

import enum
from typing import Any, Optional
from uuid import UUID


class AppError(Exception):
    """Base application exception."""

    error_code = "APP_ERROR"
    status_code = 400
    retryable = False

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        retryable: Optional[bool] = None,
    ) -> None:
        self.message = message
        self.details = details
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code
        if retryable is not None:
            self.retryable = retryable
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Render the client-facing error body; details are never included."""
        return {
            "success": False,
            "error_code": self.error_code,
            "error": self.message,
            "retryable": self.retryable,
        }


class ValidationError(AppError):
    error_code = "VALIDATION_ERROR"
    status_code = 400


class RateLimitExceededError(AppError):
    error_code = "RATE_LIMITED"
    status_code = 429
    retryable = True

    def __init__(self) -> None:
        super().__init__("Too many messages. Please wait a moment and try again.")


class NotFoundError(AppError):
    error_code = "NOT_FOUND"
    status_code = 404


class ConversationNotFoundError(NotFoundError):
    error_code = "CONVERSATION_NOT_FOUND"

    def __init__(self, conversation_id: UUID | str) -> None:
        super().__init__("Conversation not found", details=str(conversation_id))


class MessageNotFoundError(NotFoundError):
    error_code = "MESSAGE_NOT_FOUND"

    def __init__(self, message_id: UUID | str) -> None:
        super().__init__("Message not found", details=str(message_id))


class DocumentNotFoundError(NotFoundError):
    error_code = "DOCUMENT_NOT_FOUND"

    def __init__(self, document_id: UUID | str) -> None:
        super().__init__("Document not found", details=str(document_id))


class ConversationClosedError(AppError):
    """Send attempted on a closed conversation."""

    error_code = "CONVERSATION_CLOSED"
    status_code = 403

    def __init__(self, conversation_id: UUID) -> None:
        self.conversation_id = conversation_id
        super().__init__("This conversation is closed. Please reopen it to continue.")

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["session_id"] = str(self.conversation_id)
        body["closed"] = True
        return body


class NotClosedError(AppError):
    """Reopen attempted on a conversation that is still open."""

    error_code = "CONVERSATION_NOT_CLOSED"
    status_code = 409

    def __init__(self, conversation_id: UUID | str) -> None:
        super().__init__(
            "Conversation is not closed, so it cannot be reopened",
            details=str(conversation_id),
        )


class ExtractionError(AppError):
    """Document bytes could not be turned into text, or produced no text."""

    error_code = "EXTRACTION_FAILED"
    status_code = 422


class EmptyDocumentError(AppError):
    error_code = "EMPTY_DOCUMENT"
    status_code = 422

    def __init__(self, filename: str) -> None:
        super().__init__(
            "No content could be extracted from the document", details=filename
        )


class ServiceConnectivityError(AppError):
    """A backing service (database, object storage) is unreachable."""

    error_code = "SERVICE_UNAVAILABLE"
    status_code = 503
    retryable = True


class AttachmentUploadError(ServiceConnectivityError):
    error_code = "ATTACHMENT_UPLOAD_FAILED"


class EmbeddingServiceError(AppError):
    error_code = "EMBEDDING_FAILED"
    status_code = 502
    retryable = True


class VectorIndexError(AppError):
    error_code = "VECTOR_INDEX_FAILED"
    status_code = 502
    retryable = True


class CompletionErrorKind(str, enum.Enum):
    CONFIG = "config"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    GENERIC = "generic"
    EMPTY_RESPONSE = "empty_response"


_COMPLETION_STATUS = {
    CompletionErrorKind.CONFIG: 502,
    CompletionErrorKind.RATE_LIMIT: 429,
    CompletionErrorKind.TIMEOUT: 504,
    CompletionErrorKind.GENERIC: 502,
    CompletionErrorKind.EMPTY_RESPONSE: 502,
}


class CompletionServiceError(AppError):
    """Reply generation failed; message is already user-safe."""

    error_code = "COMPLETION_FAILED"
    retryable = True

    def __init__(
        self,
        kind: CompletionErrorKind,
        message: str,
        *,
        conversation_id: Optional[UUID] = None,
    ) -> None:
        self.kind = kind
        self.conversation_id = conversation_id
        super().__init__(
            message,
            status_code=_COMPLETION_STATUS[kind],
            retryable=kind != CompletionErrorKind.CONFIG,
        )

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["kind"] = self.kind.value
        if self.conversation_id is not None:
            body["session_id"] = str(self.conversation_id)
        return body


class InternalServiceError(AppError):
    error_code = "INTERNAL_ERROR"
    status_code = 500
    retryable = True

    def __init__(
        self,
        message: str = "An unexpected error occurred. Please try again.",
        *,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details)
