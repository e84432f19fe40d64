"""Persona prompt and version models; content is markdown."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin, utcnow


class SystemPrompt(Base, TimestampMixin):
    """One row per named persona (e.g. 'default'). Points to its current version."""

    __tablename__ = "system_prompts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(64), unique=True, nullable=False, index=True)
    current_version_id = Column(
        Uuid,
        ForeignKey("system_prompt_versions.id", ondelete="SET NULL"),
        nullable=True,
    )

    current_version = relationship(
        "SystemPromptVersion",
        foreign_keys=[current_version_id],
        post_update=True,
    )
    versions = relationship(
        "SystemPromptVersion",
        back_populates="system_prompt",
        foreign_keys="SystemPromptVersion.system_prompt_id",
        cascade="all, delete-orphan",
        order_by="SystemPromptVersion.version_number.desc()",
    )


class SystemPromptVersion(Base):
    """Append-only history of persona text."""

    __tablename__ = "system_prompt_versions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    system_prompt_id = Column(
        Uuid,
        ForeignKey("system_prompts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    version_number = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    note = Column(String(512), nullable=True)

    system_prompt = relationship(
        "SystemPrompt",
        back_populates="versions",
        foreign_keys=[system_prompt_id],
    )
