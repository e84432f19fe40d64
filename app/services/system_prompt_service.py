"""Service for persona prompt and version CRUD; get current content, save new version."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.default_system_prompt import DefaultSystemPrompt
from app.infra.logging_config import get_logger
from app.models.system_prompt import SystemPrompt, SystemPromptVersion

logger = get_logger("system_prompts")

PERSONA_PROMPT_NAME = "default"


class SystemPromptService:
    """Manages persona prompts and their version history."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_system_prompts(
        self,
        skip: int = 0,
        limit: int = 100,
    ) -> List[SystemPrompt]:
        """List all system prompts, ordered by name."""
        result = await self.db.execute(
            select(SystemPrompt).order_by(SystemPrompt.name).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def get_system_prompt_by_name(self, name: str) -> Optional[SystemPrompt]:
        """Fetch a system prompt by name."""
        result = await self.db.execute(
            select(SystemPrompt).where(SystemPrompt.name == name)
        )
        return result.scalar_one_or_none()

    async def create_prompt(
        self,
        name: str,
        initial_content: str = "",
        note: Optional[str] = None,
    ) -> SystemPrompt:
        """
        Create a new system prompt with its first version.
        Raises ValueError if name already exists.
        """
        if await self.get_system_prompt_by_name(name) is not None:
            raise ValueError(f"System prompt with name {name!r} already exists")
        prompt = SystemPrompt(name=name)
        self.db.add(prompt)
        await self.db.flush()
        version = SystemPromptVersion(
            system_prompt_id=prompt.id,
            content=initial_content,
            version_number=1,
            note=note or "Initial version",
        )
        self.db.add(version)
        await self.db.flush()
        prompt.current_version_id = version.id
        await self.db.commit()
        return prompt

    async def get_current_version(self, name: str) -> Optional[SystemPromptVersion]:
        prompt = await self.get_system_prompt_by_name(name)
        if prompt is None or prompt.current_version_id is None:
            return None
        return await self.db.get(SystemPromptVersion, prompt.current_version_id)

    async def get_current_content(self, name: str) -> Optional[str]:
        """
        Return the content of the current version for the given prompt name.
        Returns None if the prompt does not exist or has no current version.
        """
        version = await self.get_current_version(name)
        if version is None:
            return None
        return str(version.content)

    async def get_persona(self) -> str:
        """Stored 'default' persona, or the built-in one when none is stored or it is blank."""
        content = await self.get_current_content(PERSONA_PROMPT_NAME)
        if content and content.strip():
            return content
        logger.debug("No stored persona prompt, using built-in default")
        return DefaultSystemPrompt.CONTENT

    async def get_versions(
        self,
        name: str,
        skip: int = 0,
        limit: int = 100,
    ) -> List[SystemPromptVersion]:
        """List versions for the given prompt name, newest first."""
        prompt = await self.get_system_prompt_by_name(name)
        if prompt is None:
            return []
        result = await self.db.execute(
            select(SystemPromptVersion)
            .where(SystemPromptVersion.system_prompt_id == prompt.id)
            .order_by(SystemPromptVersion.version_number.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create_version(
        self,
        name: str,
        content: str,
        note: Optional[str] = None,
    ) -> Optional[SystemPromptVersion]:
        """
        Create a new version for the given prompt and set it as current.
        Returns the new version, or None if the prompt does not exist.
        """
        prompt = await self.get_system_prompt_by_name(name)
        if prompt is None:
            return None

        latest = await self.get_versions(name, limit=1)
        next_version = int(latest[0].version_number) + 1 if latest else 1

        version = SystemPromptVersion(
            system_prompt_id=prompt.id,
            content=content,
            version_number=next_version,
            note=note,
        )
        self.db.add(version)
        await self.db.flush()  # get version.id

        prompt.current_version_id = version.id
        await self.db.commit()
        return version
