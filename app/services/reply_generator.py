"""Reply and summary generation on top of the LLM runner."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

import httpx
from pydantic_ai.exceptions import ModelHTTPError

from app.constants.completion_errors import (
    COMPLETION_ERROR_MESSAGES,
    SUMMARY_FAILED_MESSAGE,
)
from app.constants.conversation_messages import SUMMARY_PROMPT
from app.exceptions import CompletionErrorKind
from app.infra.logging_config import get_logger
from app.models.message import MessageSender
from app.workers.llm import LLMRunner

logger = get_logger("reply_generator")

HISTORY_WINDOW = 20
REPLY_TEMPERATURE = 0.7
REPLY_MAX_TOKENS = 1024
SUMMARY_TEMPERATURE = 0.5
SUMMARY_MAX_TOKENS = 256

_CONFIG_MARKERS = ("api key", "unauthorized", "invalid")
_RATE_LIMIT_MARKERS = ("rate limit", "quota")
_TIMEOUT_MARKERS = ("timeout", "deadline")


class ChatTurn(Protocol):
    sender: str
    text: str


@dataclass
class AttachmentRef:
    url: str
    mime_type: str


@dataclass
class CompletionResult:
    success: bool
    reply: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[CompletionErrorKind] = None

    @classmethod
    def failure(cls, kind: CompletionErrorKind) -> "CompletionResult":
        return cls(success=False, error=COMPLETION_ERROR_MESSAGES[kind], error_kind=kind)


def classify_completion_error(exc: BaseException) -> CompletionErrorKind:
    """Map a provider failure onto a user-safe category."""
    if isinstance(exc, ModelHTTPError):
        if exc.status_code in (401, 403):
            return CompletionErrorKind.CONFIG
        if exc.status_code == 429:
            return CompletionErrorKind.RATE_LIMIT
        if exc.status_code in (408, 504):
            return CompletionErrorKind.TIMEOUT
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return CompletionErrorKind.TIMEOUT

    text = str(exc).lower()
    if any(marker in text for marker in _CONFIG_MARKERS):
        return CompletionErrorKind.CONFIG
    if any(marker in text for marker in _RATE_LIMIT_MARKERS):
        return CompletionErrorKind.RATE_LIMIT
    if any(marker in text for marker in _TIMEOUT_MARKERS):
        return CompletionErrorKind.TIMEOUT
    return CompletionErrorKind.GENERIC


def attachment_annotation(attachment: AttachmentRef) -> str:
    subtype = attachment.mime_type.split("/")[1] if "/" in attachment.mime_type else ""
    return f"[User attached a {subtype or 'file'} file: {attachment.url}]"


def _to_role(sender: str) -> str:
    return "user" if sender == MessageSender.USER.value else "assistant"


class ReplyGenerator:
    """Builds the role-tagged prompt and turns provider failures into CompletionResult."""

    def __init__(self, runner: LLMRunner) -> None:
        self.runner = runner

    async def generate_reply(
        self,
        system_prompt: str,
        history: Sequence[ChatTurn],
        current_message: str,
        attachment: Optional[AttachmentRef] = None,
    ) -> CompletionResult:
        """
        Ask the model for the next assistant turn.

        system_prompt is whichever persona text the caller assembled (plain
        persona or one carrying knowledge-base context). Only the last
        HISTORY_WINDOW history entries are sent.
        """
        turns: List[dict[str, str]] = [
            {"role": _to_role(turn.sender), "content": turn.text}
            for turn in list(history)[-HISTORY_WINDOW:]
        ]
        prompt = current_message
        if attachment is not None:
            prompt = f"{attachment_annotation(attachment)}\n\n{current_message}"

        try:
            text = await self.runner.complete(
                prompt,
                system_prompt=system_prompt,
                history=turns,
                temperature=REPLY_TEMPERATURE,
                max_tokens=REPLY_MAX_TOKENS,
            )
        except Exception as e:
            kind = classify_completion_error(e)
            logger.error("Reply generation failed (%s): %s", kind.value, e)
            return CompletionResult.failure(kind)

        if not text or not text.strip():
            logger.warning("Completion service returned an empty reply")
            return CompletionResult.failure(CompletionErrorKind.EMPTY_RESPONSE)
        return CompletionResult(success=True, reply=text)

    async def generate_summary(self, history: Sequence[ChatTurn]) -> CompletionResult:
        """Two-to-three sentence second-person recap; any failure is reported generically."""
        transcript = "\n".join(
            f"{'Customer' if turn.sender == MessageSender.USER.value else 'Support'}: {turn.text}"
            for turn in history
        )
        try:
            text = await self.runner.complete(
                f"{SUMMARY_PROMPT}\n\n{transcript}",
                temperature=SUMMARY_TEMPERATURE,
                max_tokens=SUMMARY_MAX_TOKENS,
            )
        except Exception as e:
            logger.error("Summary generation failed: %s", e)
            return CompletionResult(
                success=False,
                error=SUMMARY_FAILED_MESSAGE,
                error_kind=CompletionErrorKind.GENERIC,
            )

        if not text or not text.strip():
            return CompletionResult(
                success=False,
                error=SUMMARY_FAILED_MESSAGE,
                error_kind=CompletionErrorKind.EMPTY_RESPONSE,
            )
        return CompletionResult(success=True, reply=text.strip())
