"""Fixtures for system prompt and version models."""

import pytest

from app.models.system_prompt import SystemPrompt, SystemPromptVersion
from app.services.system_prompt_service import PERSONA_PROMPT_NAME


@pytest.fixture(scope="function")
async def setup_system_prompt(db, faker):
    """
    Create a system prompt with one version and set it as current.
    Returns the SystemPrompt instance.
    """
    name = faker.slug() or "returns-desk"
    prompt = SystemPrompt(name=name)
    db.add(prompt)
    await db.flush()

    version = SystemPromptVersion(
        system_prompt_id=prompt.id,
        content=faker.text(max_nb_chars=200),
        version_number=1,
        note="Initial version",
    )
    db.add(version)
    await db.flush()

    prompt.current_version_id = version.id
    await db.commit()
    return prompt


@pytest.fixture(scope="function")
async def setup_system_prompt_with_versions(db, faker):
    """
    Create a system prompt with three versions; current is the latest.
    Returns (SystemPrompt, list of SystemPromptVersion in creation order).
    """
    name = faker.slug() or "multi-version"
    prompt = SystemPrompt(name=name)
    db.add(prompt)
    await db.flush()

    versions = []
    for i in range(1, 4):
        version = SystemPromptVersion(
            system_prompt_id=prompt.id,
            content=faker.text(max_nb_chars=100),
            version_number=i,
            note=f"Version {i}",
        )
        db.add(version)
        await db.flush()
        versions.append(version)

    prompt.current_version_id = versions[-1].id
    await db.commit()
    return prompt, versions


@pytest.fixture(scope="function")
async def setup_persona_prompt(db):
    """Stored 'default' persona that replaces the built-in one."""
    prompt = SystemPrompt(name=PERSONA_PROMPT_NAME)
    db.add(prompt)
    await db.flush()
    version = SystemPromptVersion(
        system_prompt_id=prompt.id,
        content="You are Max, the ShopEase returns specialist.",
        version_number=1,
        note="Initial version",
    )
    db.add(version)
    await db.flush()
    prompt.current_version_id = version.id
    await db.commit()
    return prompt
