from __future__ import annotations

from typing import Any, List, Optional

from pydantic_ai import Agent
from pydantic_ai.messages import (
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.litellm import LiteLLMProvider
from pydantic_ai.settings import ModelSettings

from app.config import get_settings
from app.infra.logging_config import get_logger

logger = get_logger("llm")


def _history_to_message_list(history: List[dict[str, str]]) -> List[Any]:
    """Convert list of {role, content} to pydantic_ai ModelMessage list for message_history."""
    out: List[Any] = []
    for item in history:
        role = item.get("role", "user")
        content = (item.get("content") or "").strip()
        if not content:
            continue
        if role == "user":
            out.append(ModelRequest(parts=[UserPromptPart(content=content)]))
        elif role == "assistant":
            out.append(ModelResponse(parts=[TextPart(content=content)]))
        elif role == "system":
            out.append(ModelRequest(parts=[SystemPromptPart(content=content)]))
    return out


def _message_list_with_system_prompt(
    system_prompt: Optional[str],
    history: List[dict[str, str]],
) -> List[Any]:
    """Build message_history with the system prompt first, then conversation history."""

    # https://ai.pydantic.dev/agent/#system-prompts
    rest = _history_to_message_list(history)
    if not system_prompt:
        return rest
    system_message = ModelRequest(parts=[SystemPromptPart(content=system_prompt)])
    return [system_message] + rest


class LLMRunner:
    """Single-shot chat completion against the configured model; no tools, no streaming."""

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
    ) -> None:
        provider = LiteLLMProvider(api_key=api_key, api_base=api_base)
        model = OpenAIChatModel(model_name, provider=provider)
        logger.info("Initializing LLM runner with model %s", model_name)
        self.model_name = model_name
        self._agent = Agent(model)

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: Optional[str] = None,
        history: Optional[List[dict[str, str]]] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> str:
        """Return the model's text for prompt; may be empty. Provider errors propagate."""
        message_history = _message_list_with_system_prompt(system_prompt, history or [])
        result = await self._agent.run(
            prompt,
            message_history=message_history or None,
            model_settings=ModelSettings(temperature=temperature, max_tokens=max_tokens),
        )
        return str(result.output or "")


def build_llm_runner_from_env() -> LLMRunner:
    settings = get_settings()
    logger.info(
        "LLM runner config: model=%s, api_key=%s, api_base=%s",
        settings.llm_model,
        "set" if settings.litellm_api_key else "not set",
        settings.litellm_api_base or "(default)",
    )
    if not settings.litellm_api_key:
        logger.warning(
            "LITELLM_API_KEY is not set; set it to a valid provider key to avoid 401 errors."
        )

    return LLMRunner(
        model_name=settings.llm_model,
        api_key=settings.litellm_api_key,
        api_base=settings.litellm_api_base,
    )
