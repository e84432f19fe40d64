"""Inactivity countdown derived from persisted conversation state and the clock."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes from the database as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def elapsed_ms(since: datetime, now: datetime) -> int:
    return int((ensure_utc(now) - ensure_utc(since)).total_seconds() * 1000)


@dataclass(frozen=True)
class InactivityStatus:
    status: str
    warning_issued: bool
    time_until_warning: Optional[int] = None
    time_until_close: Optional[int] = None
    last_assistant_read_at: Optional[datetime] = None


def compute_inactivity_status(
    status: str,
    last_assistant_is_read: bool,
    last_assistant_read_at: Optional[datetime],
    now: datetime,
    warning_ms: int,
    close_ms: int,
) -> InactivityStatus:
    """
    Countdown for polling clients, keyed on the latest assistant message.

    No countdown runs while the conversation is closed, has no assistant message,
    or that message is unread. Durations are milliseconds.
    """
    if status != "open" or not last_assistant_is_read or last_assistant_read_at is None:
        return InactivityStatus(status=status, warning_issued=False)

    since_read = elapsed_ms(last_assistant_read_at, now)
    return InactivityStatus(
        status=status,
        warning_issued=since_read >= warning_ms,
        time_until_warning=max(0, warning_ms - since_read),
        time_until_close=max(0, warning_ms + close_ms - since_read),
        last_assistant_read_at=ensure_utc(last_assistant_read_at),
    )
