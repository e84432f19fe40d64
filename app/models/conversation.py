"""Conversation model: one row per support chat session."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin, utcnow


class ConversationStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class Conversation(Base, TimestampMixin):
    """
    Support conversation. closed_at is set iff status is 'closed'.

    warning_sent_at records the pending inactivity warning so the sweeper can
    decide on closure from persisted state alone.
    """

    __tablename__ = "conversations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    status = Column(
        String(16), nullable=False, default=ConversationStatus.OPEN.value, index=True
    )
    last_activity_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    warning_sent_at = Column(DateTime(timezone=True), nullable=True)

    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    @property
    def is_closed(self) -> bool:
        return self.status == ConversationStatus.CLOSED.value
