"""Command that accepts one user message and produces the assistant reply."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.base import BaseBlobStorage, StoredBlob
from app.constants.completion_errors import COMPLETION_ERROR_MESSAGES
from app.core.errors import to_app_error
from app.exceptions import (
    AppError,
    AttachmentUploadError,
    CompletionErrorKind,
    CompletionServiceError,
    ConversationClosedError,
)
from app.models.message import Attachment
from app.services.conversation_service import ConversationService
from app.services.message_service import MessageService
from app.services.reply_generator import AttachmentRef, ReplyGenerator
from app.services.retriever import KnowledgeBaseRetriever, build_context_prompt
from app.services.system_prompt_service import SystemPromptService


@dataclass
class UploadedFile:
    content: bytes
    file_name: str
    content_type: str


@dataclass
class SendMessageResult:
    reply: str
    session_id: UUID
    attachment: Optional[Attachment] = None


class SendMessageCommand:
    """
    Handle a chat send: reject closed conversations, persist the user turn, then
    ask the model for a reply and persist it.

    Two concurrent sends to the same conversation are not serialized. Both may
    see it open before either commits, so a send racing a close can still be
    answered. Each call produces at most one reply.
    """

    def __init__(
        self,
        db: AsyncSession,
        reply_generator: ReplyGenerator,
        retriever: KnowledgeBaseRetriever,
        blob_storage: Optional[BaseBlobStorage] = None,
    ) -> None:
        self.db = db
        self.reply_generator = reply_generator
        self.retriever = retriever
        self.blob_storage = blob_storage
        self.logger = logging.getLogger(__name__)

    async def execute(
        self,
        message: str,
        session_id: Optional[UUID] = None,
        upload: Optional[UploadedFile] = None,
    ) -> SendMessageResult:
        """
        Execute the send.

        Args:
            message: User text, already length-validated
            session_id: Existing conversation id; unknown or missing ids start a new one
            upload: Optional attachment to store and reference in the prompt

        Returns:
            SendMessageResult: The reply, the conversation id and the stored attachment

        Raises:
            ConversationClosedError: The conversation is closed; nothing is persisted
            CompletionServiceError: The model failed; the user message stays persisted
            ServiceConnectivityError: The database or attachment storage is unreachable
            InternalServiceError: Anything else
        """
        try:
            return await self._execute(message, session_id, upload)
        except AppError:
            raise
        except Exception as e:
            await self.db.rollback()
            self.logger.exception("Send failed for session=%s", session_id)
            raise to_app_error(e) from e

    async def _execute(
        self,
        message: str,
        session_id: Optional[UUID],
        upload: Optional[UploadedFile],
    ) -> SendMessageResult:
        conversations = ConversationService(self.db)
        messages = MessageService(self.db)

        conversation = await conversations.get_or_create(session_id)
        if conversation.is_closed:
            raise ConversationClosedError(conversation.id)

        blob = await self._store_upload(upload)

        history = await messages.get_messages(conversation.id)
        user_message = messages.add_user_message(conversation.id, message, blob=blob)
        conversation.warning_sent_at = None
        ConversationService.touch(conversation, user_message.created_at)
        await self.db.commit()

        system_prompt = await self._select_system_prompt(message)
        attachment_ref = (
            AttachmentRef(url=blob.url, mime_type=blob.file_type) if blob else None
        )
        result = await self.reply_generator.generate_reply(
            system_prompt, history, message, attachment_ref
        )
        if not result.success or not result.reply:
            self.logger.warning(
                "No reply for conversation=%s (%s)",
                conversation.id,
                result.error_kind.value if result.error_kind else "unknown",
            )
            kind = result.error_kind or CompletionErrorKind.GENERIC
            raise CompletionServiceError(
                kind,
                result.error or COMPLETION_ERROR_MESSAGES[kind],
                conversation_id=conversation.id,
            )

        assistant_message = messages.add_assistant_message(conversation.id, result.reply)
        ConversationService.touch(conversation, assistant_message.created_at)
        await self.db.commit()

        return SendMessageResult(
            reply=result.reply,
            session_id=conversation.id,
            attachment=user_message.attachment,
        )

    async def _store_upload(self, upload: Optional[UploadedFile]) -> Optional[StoredBlob]:
        if upload is None:
            return None
        if self.blob_storage is None:
            raise AttachmentUploadError(
                "File attachments are not available right now.",
                retryable=False,
            )
        return await self.blob_storage.upload(
            upload.content, upload.file_name, upload.content_type
        )

    async def _select_system_prompt(self, message: str) -> str:
        """Knowledge-base persona when retrieval found context, stored persona otherwise."""
        retrieval = await self.retriever.retrieve(message)
        if retrieval.context:
            self.logger.debug(
                "Using knowledge base context from %d sources", len(retrieval.sources)
            )
            return build_context_prompt(retrieval.context)
        return await SystemPromptService(self.db).get_persona()
