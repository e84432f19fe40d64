"""Chat API: send, history, read receipts, status, close and reopen."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.base import BaseBlobStorage
from app.commands.chat.send_message_command import SendMessageCommand, UploadedFile
from app.config import get_settings
from app.db import get_db
from app.exceptions import RateLimitExceededError, ValidationError
from app.infra.redis_client import get_async_redis
from app.routers.utils.dependencies import (
    get_blob_storage,
    get_reply_generator,
    get_retriever,
)
from app.schemas.chat import (
    AttachmentRead,
    CloseConversationResponse,
    ConversationHistoryRead,
    ConversationStatusRead,
    MarkAllReadResponse,
    MarkReadResponse,
    MessageRead,
    ReopenConversationResponse,
    SendMessageResponse,
)
from app.services.conversation_manager import ConversationManager
from app.services.reply_generator import ReplyGenerator
from app.services.retriever import KnowledgeBaseRetriever
from app.utils.rate_limit import check_chat_rate_limit

chat_router = APIRouter(prefix="/chat", tags=["Chat"])

ALLOWED_ATTACHMENT_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "text/plain",
    "text/csv",
)
MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024


def validate_message_text(message: Optional[str], max_length: int) -> str:
    """Trimmed message text; raises ValidationError when empty or too long."""
    text = (message or "").strip()
    if not text:
        raise ValidationError("Message is required")
    if len(text) > max_length:
        raise ValidationError(
            f"Your message is too long. Please keep it under {max_length} characters "
            f"(approximately {max_length // 5} words)."
        )
    return text


def parse_session_id(session_id: Optional[str]) -> Optional[UUID]:
    if session_id is None or not session_id.strip():
        return None
    try:
        return UUID(session_id.strip())
    except ValueError as e:
        raise ValidationError("Invalid session ID format") from e


async def read_attachment(file: Optional[UploadFile]) -> Optional[UploadedFile]:
    if file is None or not file.filename:
        return None
    content_type = file.content_type or "application/octet-stream"
    if content_type not in ALLOWED_ATTACHMENT_TYPES:
        raise ValidationError(
            "File type not supported. Allowed: " + ", ".join(ALLOWED_ATTACHMENT_TYPES)
        )
    content = await file.read()
    if len(content) > MAX_ATTACHMENT_BYTES:
        raise ValidationError("File too large. Maximum size: 10MB")
    return UploadedFile(content=content, file_name=file.filename, content_type=content_type)


async def enforce_chat_rate_limit(request: Request) -> None:
    limit = get_settings().chat_rate_limit_per_minute
    if not limit:
        return
    client_key = request.client.host if request.client else "anonymous"
    redis_client = get_async_redis()
    try:
        allowed = await check_chat_rate_limit(client_key, redis_client, limit)
    finally:
        await redis_client.aclose()
    if not allowed:
        raise RateLimitExceededError()


@chat_router.post("/message", response_model=SendMessageResponse)
async def send_message(
    message: Optional[str] = Form(None),
    session_id: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    _rate_limited: None = Depends(enforce_chat_rate_limit),
    db: AsyncSession = Depends(get_db),
    reply_generator: ReplyGenerator = Depends(get_reply_generator),
    retriever: KnowledgeBaseRetriever = Depends(get_retriever),
    blob_storage: Optional[BaseBlobStorage] = Depends(get_blob_storage),
) -> SendMessageResponse:
    """Send a user message (optionally with an attachment) and return the assistant reply."""
    text = validate_message_text(message, get_settings().max_message_length)
    conversation_id = parse_session_id(session_id)
    upload = await read_attachment(file)

    command = SendMessageCommand(db, reply_generator, retriever, blob_storage)
    result = await command.execute(text, session_id=conversation_id, upload=upload)
    return SendMessageResponse(
        reply=result.reply,
        session_id=result.session_id,
        attachment=(
            AttachmentRead.model_validate(result.attachment)
            if result.attachment is not None
            else None
        ),
    )


@chat_router.get("/history/{session_id}", response_model=ConversationHistoryRead)
async def get_history(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ConversationHistoryRead:
    """Conversation with all of its messages, oldest first."""
    conversation = await ConversationManager(db).get_history(session_id)
    return ConversationHistoryRead.model_validate(conversation)


@chat_router.get("/status/{session_id}", response_model=ConversationStatusRead)
async def get_status(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ConversationStatusRead:
    """Inactivity countdown for polling clients."""
    status = await ConversationManager(db).get_status(session_id)
    return ConversationStatusRead.model_validate(status)


@chat_router.patch("/read/{message_id}", response_model=MarkReadResponse)
async def mark_message_read(
    message_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> MarkReadResponse:
    result = await ConversationManager(db).mark_message_read(message_id)
    return MarkReadResponse(already_read=result.already_read)


@chat_router.patch("/read-all/{session_id}", response_model=MarkAllReadResponse)
async def mark_all_read(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> MarkAllReadResponse:
    updated = await ConversationManager(db).mark_all_read(session_id)
    return MarkAllReadResponse(updated=updated)


@chat_router.post("/close/{session_id}", response_model=CloseConversationResponse)
async def close_conversation(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CloseConversationResponse:
    """Close the conversation; closing an already closed one is a no-op."""
    conversation = await ConversationManager(db).close(session_id)
    return CloseConversationResponse(
        session_id=conversation.id,
        status=conversation.status,
        closed_at=conversation.closed_at,
    )


@chat_router.patch("/reopen/{session_id}", response_model=ReopenConversationResponse)
async def reopen_conversation(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
    reply_generator: ReplyGenerator = Depends(get_reply_generator),
) -> ReopenConversationResponse:
    """Reopen a closed conversation with a recap of what was discussed."""
    result = await ConversationManager(db, reply_generator).reopen(session_id)
    return ReopenConversationResponse(
        session_id=result.conversation.id,
        summary=result.summary,
        message=MessageRead.model_validate(result.message),
    )
