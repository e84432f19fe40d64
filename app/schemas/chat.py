"""Pydantic schemas for the chat API."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class AttachmentRead(BaseModel):
    id: UUID
    file_name: str
    file_type: str
    file_url: str
    file_size: Optional[int] = None

    model_config = {"from_attributes": True}


class MessageRead(BaseModel):
    id: UUID
    sender: Literal["user", "assistant"]
    text: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    attachment: Optional[AttachmentRead] = None

    model_config = {"from_attributes": True}


class SendMessageResponse(BaseModel):
    success: bool = True
    reply: str
    session_id: UUID
    attachment: Optional[AttachmentRead] = None


class ConversationHistoryRead(BaseModel):
    id: UUID
    status: Literal["open", "closed"]
    created_at: datetime
    last_activity_at: datetime
    closed_at: Optional[datetime] = None
    messages: List[MessageRead]

    model_config = {"from_attributes": True}


class ConversationStatusRead(BaseModel):
    """Inactivity countdown in milliseconds; countdown fields are null when no countdown runs."""

    status: Literal["open", "closed"]
    warning_issued: bool
    time_until_warning: Optional[int] = None
    time_until_close: Optional[int] = None
    last_assistant_read_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MarkReadResponse(BaseModel):
    success: bool = True
    already_read: bool


class MarkAllReadResponse(BaseModel):
    success: bool = True
    updated: int


class CloseConversationResponse(BaseModel):
    success: bool = True
    session_id: UUID
    status: Literal["open", "closed"]
    closed_at: Optional[datetime] = None


class ReopenConversationResponse(BaseModel):
    success: bool = True
    session_id: UUID
    summary: str
    message: MessageRead
