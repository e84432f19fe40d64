"""Tests for the inactivity sweeper's warn/close cycle."""

from datetime import timedelta

from sqlalchemy import select

from app.constants.conversation_messages import CLOSED_MESSAGE, WARNING_MESSAGE
from app.models.conversation import Conversation
from app.models.message import MessageSender
from app.services.conversation_manager import ConversationManager
from app.services.inactivity_sweeper import InactivitySweeper
from app.services.message_service import MessageService

WARNING_MS = 120000
CLOSE_MS = 60000


def _sweeper(db):
    return InactivitySweeper(db, warning_ms=WARNING_MS, close_ms=CLOSE_MS)


async def _texts(db, conversation_id):
    return [m.text for m in await MessageService(db).get_messages(conversation_id)]


async def test_no_action_before_warning_threshold(db, setup_conversation):
    conversation, _, assistant_message = setup_conversation
    now = assistant_message.read_at + timedelta(seconds=60)

    report = await _sweeper(db).sweep(now=now)

    assert report.scanned == 1
    assert report.warned == 0
    assert conversation.warning_sent_at is None


async def test_warns_then_closes(db, setup_conversation):
    conversation, _, assistant_message = setup_conversation
    warn_at = assistant_message.read_at + timedelta(milliseconds=WARNING_MS + 1000)

    report = await _sweeper(db).sweep(now=warn_at)
    assert report.warned == 1
    assert conversation.warning_sent_at == warn_at
    assert (await _texts(db, conversation.id))[-1] == WARNING_MESSAGE

    # Still inside the close window: nothing happens, and no second warning.
    report = await _sweeper(db).sweep(now=warn_at + timedelta(seconds=30))
    assert report.warned == 0
    assert report.closed == 0

    close_at = warn_at + timedelta(milliseconds=CLOSE_MS)
    report = await _sweeper(db).sweep(now=close_at)
    assert report.closed == 1
    assert conversation.status == "closed"
    assert conversation.closed_at == close_at
    texts = await _texts(db, conversation.id)
    assert texts.count(WARNING_MESSAGE) == 1
    assert texts[-1] == CLOSED_MESSAGE


async def test_user_reply_after_warning_prevents_close(
    db, setup_conversation, message_factory
):
    conversation, _, assistant_message = setup_conversation
    warn_at = assistant_message.read_at + timedelta(milliseconds=WARNING_MS)
    await _sweeper(db).sweep(now=warn_at)
    assert conversation.warning_sent_at is not None

    await message_factory(
        conversation,
        sender=MessageSender.USER.value,
        text="Still here!",
        created_at=warn_at + timedelta(seconds=10),
    )

    report = await _sweeper(db).sweep(now=warn_at + timedelta(milliseconds=CLOSE_MS + 5000))

    assert report.closed == 0
    assert report.cleared == 1
    assert conversation.status == "open"
    assert conversation.warning_sent_at is None


async def test_unread_reply_does_not_start_countdown(
    db, conversation_factory, message_factory, base_time
):
    conversation = await conversation_factory()
    await message_factory(conversation, sender=MessageSender.USER.value, created_at=base_time)
    await message_factory(
        conversation, created_at=base_time + timedelta(seconds=1), is_read=False
    )

    report = await _sweeper(db).sweep(now=base_time + timedelta(hours=1))

    assert report.warned == 0
    assert report.closed == 0


async def test_closed_conversations_are_skipped(db, setup_closed_conversation, base_time):
    report = await _sweeper(db).sweep(now=base_time + timedelta(hours=1))
    assert report.scanned == 0


async def test_reopen_restarts_countdown(db, setup_closed_conversation, base_time):
    """The assistant message was read long ago, but a reopen counts as fresh activity."""
    reopened_at = base_time + timedelta(hours=1)
    await ConversationManager(db).reopen(setup_closed_conversation.id, now=reopened_at)

    report = await _sweeper(db).sweep(now=reopened_at + timedelta(seconds=30))
    assert report.warned == 0

    report = await _sweeper(db).sweep(
        now=reopened_at + timedelta(milliseconds=WARNING_MS)
    )
    assert report.warned == 1


async def test_status_after_reopen_reports_no_countdown_while_sweeper_counts(
    db, setup_closed_conversation, base_time
):
    manager = ConversationManager(db)
    reopened_at = base_time + timedelta(hours=1)
    await manager.reopen(setup_closed_conversation.id, now=reopened_at)

    warn_at = reopened_at + timedelta(milliseconds=WARNING_MS)
    status = await manager.get_status(setup_closed_conversation.id, now=warn_at)
    assert status.status == "open"
    assert status.time_until_warning is None

    report = await _sweeper(db).sweep(now=warn_at)
    assert report.warned == 1


async def test_one_failing_conversation_does_not_stop_the_sweep(
    db, setup_conversation, conversation_factory, message_factory, base_time, monkeypatch
):
    conversation, _, _ = setup_conversation
    other = await conversation_factory()
    await message_factory(other, created_at=base_time, is_read=True)
    failing_id, other_id = conversation.id, other.id

    sweeper = _sweeper(db)
    original_warn = sweeper._manager.warn

    async def flaky_warn(conversation_id, now=None):
        if conversation_id == failing_id:
            raise RuntimeError("database hiccup")
        return await original_warn(conversation_id, now=now)

    monkeypatch.setattr(sweeper._manager, "warn", flaky_warn)
    report = await sweeper.sweep(now=base_time + timedelta(minutes=5))

    assert report.scanned == 2
    assert report.failed == 1
    assert report.warned == 1
    warned_at = await db.scalar(
        select(Conversation.warning_sent_at).where(Conversation.id == other_id)
    )
    assert warned_at is not None
