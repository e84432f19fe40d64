"""Periodic inactivity pass: warn idle conversations, then close them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.inactivity import elapsed_ms, ensure_utc
from app.infra.logging_config import get_logger
from app.models.mixins import utcnow
from app.services.conversation_manager import ConversationManager
from app.services.conversation_service import ConversationService
from app.services.message_service import MessageService

logger = get_logger("inactivity_sweeper")

WARNED = "warned"
CLOSED = "closed"
CLEARED = "cleared"


@dataclass
class SweepReport:
    scanned: int = 0
    warned: int = 0
    closed: int = 0
    cleared: int = 0
    failed: int = 0


class InactivitySweeper:
    """
    Works only from persisted state: the warning marker is
    Conversation.warning_sent_at, so any number of sweeper processes, or a
    restarted one, reach the same decisions.
    """

    def __init__(
        self,
        db: AsyncSession,
        warning_ms: Optional[int] = None,
        close_ms: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self.db = db
        self.warning_ms = warning_ms if warning_ms is not None else settings.inactivity_warning_ms
        self.close_ms = close_ms if close_ms is not None else settings.inactivity_close_ms
        self._conversations = ConversationService(db)
        self._messages = MessageService(db)
        self._manager = ConversationManager(db)

    async def sweep(self, now: Optional[datetime] = None) -> SweepReport:
        now = now or utcnow()
        report = SweepReport()
        for conversation_id in await self._conversations.get_open_conversation_ids():
            report.scanned += 1
            try:
                action = await self._process(conversation_id, now)
            except Exception:
                await self.db.rollback()
                report.failed += 1
                logger.exception("Inactivity check failed for conversation %s", conversation_id)
                continue
            if action == WARNED:
                report.warned += 1
            elif action == CLOSED:
                report.closed += 1
            elif action == CLEARED:
                report.cleared += 1

        if report.warned or report.closed or report.failed:
            logger.info(
                "Inactivity sweep: scanned=%d warned=%d closed=%d cleared=%d failed=%d",
                report.scanned,
                report.warned,
                report.closed,
                report.cleared,
                report.failed,
            )
        return report

    async def _process(self, conversation_id: UUID, now: datetime) -> Optional[str]:
        conversation = await self._conversations.get_conversation(conversation_id)
        if conversation is None or conversation.is_closed:
            return None

        last_read = await self._messages.get_latest_assistant_message(
            conversation_id, read_only=True
        )
        if last_read is None or last_read.read_at is None:
            return None

        if await self._messages.has_user_message_after(conversation_id, last_read.created_at):
            if conversation.warning_sent_at is None:
                return None
            conversation.warning_sent_at = None
            await self.db.commit()
            return CLEARED

        if conversation.warning_sent_at is not None:
            if elapsed_ms(conversation.warning_sent_at, now) >= self.close_ms:
                await self._manager.close(conversation_id, now=now)
                return CLOSED
            return None

        # A reopen counts as activity, so the countdown restarts from it.
        idle_since = max(
            ensure_utc(last_read.read_at), ensure_utc(conversation.last_activity_at)
        )
        if elapsed_ms(idle_since, now) >= self.warning_ms:
            await self._manager.warn(conversation_id, now=now)
            return WARNED
        return None
