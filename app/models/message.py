"""Message and Attachment models."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import utcnow


class MessageSender(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(Base):
    """One chat turn. Only is_read/read_at change after insert."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        Uuid,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender = Column(String(16), nullable=False)  # 'user' | 'assistant'
    text = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    conversation = relationship("Conversation", back_populates="messages")
    attachment = relationship(
        "Attachment",
        back_populates="message",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class Attachment(Base):
    """File uploaded alongside a user message; the blob itself lives in object storage."""

    __tablename__ = "attachments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    message_id = Column(
        Uuid,
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(127), nullable=False)
    file_url = Column(String(2048), nullable=False)
    storage_key = Column(String(1024), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    message = relationship("Message", back_populates="attachment")
