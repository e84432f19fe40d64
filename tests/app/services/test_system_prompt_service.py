"""Tests for SystemPromptService."""

import pytest

from app.constants.default_system_prompt import DefaultSystemPrompt
from app.models.system_prompt import SystemPrompt
from app.services.system_prompt_service import PERSONA_PROMPT_NAME, SystemPromptService


async def test_get_system_prompt_by_name_found(db, setup_system_prompt):
    """get_system_prompt_by_name returns the prompt when it exists."""
    prompt = setup_system_prompt
    svc = SystemPromptService(db)
    found = await svc.get_system_prompt_by_name(prompt.name)
    assert found is not None
    assert found.id == prompt.id
    assert found.name == prompt.name


async def test_get_system_prompt_by_name_not_found(db):
    """get_system_prompt_by_name returns None for unknown name."""
    svc = SystemPromptService(db)
    assert await svc.get_system_prompt_by_name("nonexistent") is None


async def test_get_current_content_not_found(db):
    """get_current_content returns None for unknown name."""
    svc = SystemPromptService(db)
    assert await svc.get_current_content("nonexistent") is None


async def test_get_versions_newest_first(db, setup_system_prompt_with_versions):
    """get_versions returns versions newest first (by version_number desc)."""
    prompt, _ = setup_system_prompt_with_versions
    svc = SystemPromptService(db)
    versions = await svc.get_versions(prompt.name)
    assert [v.version_number for v in versions] == [3, 2, 1]


async def test_get_versions_pagination(db, setup_system_prompt_with_versions):
    """get_versions respects skip and limit."""
    prompt, _ = setup_system_prompt_with_versions
    svc = SystemPromptService(db)
    page1 = await svc.get_versions(prompt.name, skip=0, limit=2)
    assert [v.version_number for v in page1] == [3, 2]

    page2 = await svc.get_versions(prompt.name, skip=2, limit=2)
    assert [v.version_number for v in page2] == [1]


async def test_create_prompt_with_initial_version(db):
    """create_prompt stores version 1 and makes it current."""
    svc = SystemPromptService(db)
    prompt = await svc.create_prompt("holiday", initial_content="Seasonal persona")
    assert prompt.current_version_id is not None
    assert await svc.get_current_content("holiday") == "Seasonal persona"


async def test_create_prompt_duplicate_name_raises(db, setup_system_prompt):
    svc = SystemPromptService(db)
    with pytest.raises(ValueError):
        await svc.create_prompt(setup_system_prompt.name)


async def test_create_version_first_version(db, faker):
    """create_version adds first version and sets it as current when prompt has no versions."""
    name = faker.slug() or "new-prompt"
    prompt = SystemPrompt(name=name)
    db.add(prompt)
    await db.commit()

    svc = SystemPromptService(db)
    version = await svc.create_version(name, "New markdown content", note="First")

    assert version is not None
    assert version.version_number == 1
    assert version.note == "First"
    assert version.system_prompt_id == prompt.id
    assert prompt.current_version_id == version.id
    assert await svc.get_current_content(name) == "New markdown content"


async def test_create_version_second_version(db, setup_system_prompt):
    """create_version adds new version and updates current."""
    prompt = setup_system_prompt
    svc = SystemPromptService(db)
    version = await svc.create_version(prompt.name, "Updated system prompt", note="Update")

    assert version is not None
    assert version.version_number == 2
    assert await svc.get_current_content(prompt.name) == "Updated system prompt"
    versions = await svc.get_versions(prompt.name)
    assert len(versions) == 2


async def test_create_version_unknown_name_returns_none(db):
    """create_version returns None when prompt name does not exist."""
    svc = SystemPromptService(db)
    assert await svc.create_version("nonexistent", "content", note="x") is None


async def test_get_persona_falls_back_to_builtin(db):
    """Without a stored 'default' prompt the built-in persona is used."""
    svc = SystemPromptService(db)
    assert await svc.get_persona() == DefaultSystemPrompt.CONTENT


async def test_get_persona_ignores_blank_stored_prompt(db):
    """An empty seeded 'default' prompt still yields the built-in persona."""
    svc = SystemPromptService(db)
    await svc.create_prompt(PERSONA_PROMPT_NAME, initial_content="   ")
    assert await svc.get_persona() == DefaultSystemPrompt.CONTENT


async def test_get_persona_uses_stored_prompt(db, setup_persona_prompt):
    svc = SystemPromptService(db)
    assert await svc.get_persona() == "You are Max, the ShopEase returns specialist."
