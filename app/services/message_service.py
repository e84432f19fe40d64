"""Message persistence and read tracking."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.base import StoredBlob
from app.models.message import Attachment, Message, MessageSender
from app.models.mixins import utcnow


class MessageService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def add_user_message(
        self,
        conversation_id: UUID,
        text: str,
        blob: Optional[StoredBlob] = None,
        now: Optional[datetime] = None,
    ) -> Message:
        """Stage a user message; user input counts as read from the moment it arrives."""
        now = now or utcnow()
        message = Message(
            conversation_id=conversation_id,
            sender=MessageSender.USER.value,
            text=text,
            is_read=True,
            read_at=now,
            created_at=now,
        )
        if blob is not None:
            message.attachment = Attachment(
                file_name=blob.file_name,
                file_type=blob.file_type,
                file_url=blob.url,
                storage_key=blob.key,
                file_size=blob.file_size,
            )
        else:
            message.attachment = None
        self.db.add(message)
        return message

    def add_assistant_message(
        self,
        conversation_id: UUID,
        text: str,
        now: Optional[datetime] = None,
    ) -> Message:
        """Stage an assistant message; it stays unread until the client reports it."""
        message = Message(
            conversation_id=conversation_id,
            sender=MessageSender.ASSISTANT.value,
            text=text,
            is_read=False,
            created_at=now or utcnow(),
        )
        message.attachment = None
        self.db.add(message)
        return message

    async def get_message(self, message_id: UUID) -> Optional[Message]:
        return await self.db.get(Message, message_id)

    async def get_messages(self, conversation_id: UUID) -> List[Message]:
        result = await self.db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at)
        )
        return list(result.scalars().all())

    async def get_latest_assistant_message(
        self, conversation_id: UUID, read_only: bool = False
    ) -> Optional[Message]:
        query = select(Message).where(
            Message.conversation_id == conversation_id,
            Message.sender == MessageSender.ASSISTANT.value,
        )
        if read_only:
            query = query.where(Message.is_read.is_(True))
        result = await self.db.execute(
            query.order_by(Message.created_at.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def has_user_message_after(
        self, conversation_id: UUID, after: datetime
    ) -> bool:
        result = await self.db.execute(
            select(Message.id)
            .where(
                Message.conversation_id == conversation_id,
                Message.sender == MessageSender.USER.value,
                Message.created_at > after,
            )
            .limit(1)
        )
        return result.first() is not None

    async def mark_read(self, message: Message) -> Tuple[Message, bool]:
        """Returns (message, already_read). read_at is only ever set once."""
        if message.is_read:
            return message, True
        message.is_read = True
        message.read_at = utcnow()
        await self.db.commit()
        return message, False

    async def mark_all_assistant_read(self, conversation_id: UUID) -> int:
        """Bulk-mark unread assistant messages; rows already read keep their read_at."""
        result = await self.db.execute(
            update(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.sender == MessageSender.ASSISTANT.value,
                Message.is_read.is_(False),
            )
            .values(is_read=True, read_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        await self.db.commit()
        return result.rowcount or 0
