"""ConversationManager: the open/closed lifecycle, read tracking and inactivity status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.constants.conversation_messages import (
    CLOSED_MESSAGE,
    CLOSURE_PHRASE,
    SUMMARY_UNAVAILABLE,
    WARNING_MESSAGE,
    reopened_message,
)
from app.core.inactivity import InactivityStatus, compute_inactivity_status
from app.exceptions import (
    ConversationNotFoundError,
    MessageNotFoundError,
    NotClosedError,
)
from app.infra.logging_config import get_logger
from app.models.conversation import Conversation, ConversationStatus
from app.models.message import Message
from app.models.mixins import utcnow
from app.services.conversation_service import ConversationService
from app.services.message_service import MessageService
from app.services.reply_generator import ReplyGenerator

logger = get_logger("conversation_manager")


@dataclass
class MarkReadResult:
    message: Message
    already_read: bool


@dataclass
class ReopenResult:
    conversation: Conversation
    summary: str
    message: Message


class ConversationManager:
    """
    Transitions for a single conversation. Sends live in SendMessageCommand; the
    sweeper drives warn/close through this class.
    """

    def __init__(
        self,
        db: AsyncSession,
        reply_generator: Optional[ReplyGenerator] = None,
    ) -> None:
        self._db = db
        self._conversations = ConversationService(db)
        self._messages = MessageService(db)
        self._reply_generator = reply_generator

    async def _require(self, conversation_id: UUID) -> Conversation:
        conversation = await self._conversations.get_conversation(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    async def get_history(self, conversation_id: UUID) -> Conversation:
        """Conversation with messages (ascending) and their attachments loaded."""
        conversation = await self._conversations.get_conversation_with_messages(
            conversation_id
        )
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    async def close(
        self, conversation_id: UUID, now: Optional[datetime] = None
    ) -> Conversation:
        """
        Close the conversation, then announce it.

        The status change is committed first. If appending the announcement
        fails, the failure is logged and the conversation stays closed.
        """
        conversation = await self._require(conversation_id)
        if conversation.is_closed:
            return conversation

        now = now or utcnow()
        conversation.status = ConversationStatus.CLOSED.value
        conversation.closed_at = now
        conversation.warning_sent_at = None
        await self._db.commit()
        logger.info("Closed conversation %s", conversation_id)

        try:
            self._messages.add_assistant_message(conversation_id, CLOSED_MESSAGE, now=now)
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            logger.exception(
                "Closure announcement could not be saved for conversation %s",
                conversation_id,
            )
            await self._db.refresh(conversation)
        return conversation

    async def warn(
        self, conversation_id: UUID, now: Optional[datetime] = None
    ) -> Message:
        """Append the inactivity warning and remember when it was sent."""
        conversation = await self._require(conversation_id)
        now = now or utcnow()
        message = self._messages.add_assistant_message(
            conversation_id, WARNING_MESSAGE, now=now
        )
        conversation.warning_sent_at = now
        await self._db.commit()
        logger.info("Sent inactivity warning for conversation %s", conversation_id)
        return message

    async def reopen(
        self, conversation_id: UUID, now: Optional[datetime] = None
    ) -> ReopenResult:
        """Reopen a closed conversation and greet the user with a recap of it."""
        conversation = await self._require(conversation_id)
        if not conversation.is_closed:
            raise NotClosedError(conversation_id)

        history = [
            m
            for m in await self._messages.get_messages(conversation_id)
            if CLOSURE_PHRASE not in m.text
        ]
        summary = SUMMARY_UNAVAILABLE
        if self._reply_generator is not None:
            result = await self._reply_generator.generate_summary(history)
            if result.success and result.reply:
                summary = result.reply

        now = now or utcnow()
        conversation.status = ConversationStatus.OPEN.value
        conversation.closed_at = None
        conversation.warning_sent_at = None
        ConversationService.touch(conversation, now)
        message = self._messages.add_assistant_message(
            conversation_id, reopened_message(summary), now=now
        )
        await self._db.commit()
        logger.info("Reopened conversation %s", conversation_id)
        return ReopenResult(conversation=conversation, summary=summary, message=message)

    async def mark_message_read(self, message_id: UUID) -> MarkReadResult:
        message = await self._messages.get_message(message_id)
        if message is None:
            raise MessageNotFoundError(message_id)
        message, already_read = await self._messages.mark_read(message)
        return MarkReadResult(message=message, already_read=already_read)

    async def mark_all_read(self, conversation_id: UUID) -> int:
        await self._require(conversation_id)
        return await self._messages.mark_all_assistant_read(conversation_id)

    async def get_status(
        self, conversation_id: UUID, now: Optional[datetime] = None
    ) -> InactivityStatus:
        """
        Derived countdown for polling clients; does not depend on the sweeper having run.

        Keyed on the latest assistant message, so after a reopen (whose message is
        unread) no countdown is reported. The sweeper still counts from the reopen
        through last_activity_at and warns warning_ms later, so the warning can
        arrive while this reports no countdown.
        """
        settings = get_settings()
        conversation = await self._require(conversation_id)
        latest = await self._messages.get_latest_assistant_message(conversation_id)
        return compute_inactivity_status(
            status=conversation.status,
            last_assistant_is_read=bool(latest is not None and latest.is_read),
            last_assistant_read_at=latest.read_at if latest is not None else None,
            now=now or utcnow(),
            warning_ms=settings.inactivity_warning_ms,
            close_ms=settings.inactivity_close_ms,
        )
