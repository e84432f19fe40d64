"""Conversation persistence: lookup, lazy creation and open-conversation listing."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.inactivity import ensure_utc
from app.models.conversation import Conversation, ConversationStatus
from app.models.message import Message
from app.models.mixins import utcnow


class ConversationService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_conversation(self, conversation_id: UUID) -> Optional[Conversation]:
        return await self.db.get(Conversation, conversation_id)

    async def get_conversation_with_messages(
        self, conversation_id: UUID
    ) -> Optional[Conversation]:
        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.id == conversation_id)
            .options(selectinload(Conversation.messages).selectinload(Message.attachment))
        )
        return result.scalar_one_or_none()

    async def create_conversation(self) -> Conversation:
        conversation = Conversation(status=ConversationStatus.OPEN.value)
        self.db.add(conversation)
        await self.db.commit()
        return conversation

    async def get_or_create(self, conversation_id: Optional[UUID]) -> Conversation:
        """Unknown or missing ids start a new conversation rather than failing."""
        if conversation_id is not None:
            existing = await self.get_conversation(conversation_id)
            if existing is not None:
                return existing
        return await self.create_conversation()

    async def get_open_conversation_ids(self) -> List[UUID]:
        result = await self.db.execute(
            select(Conversation.id)
            .where(Conversation.status == ConversationStatus.OPEN.value)
            .order_by(Conversation.last_activity_at)
        )
        return list(result.scalars().all())

    @staticmethod
    def touch(conversation: Conversation, now: Optional[datetime] = None) -> None:
        """Advance last_activity_at; never moves it backwards."""
        now = now or utcnow()
        current = ensure_utc(conversation.last_activity_at)
        if current is None or now > current:
            conversation.last_activity_at = now
