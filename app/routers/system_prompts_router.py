"""System prompts API: persona prompts and their version history."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.schemas.system_prompt import (
    SystemPromptCreate,
    SystemPromptCurrentRead,
    SystemPromptRead,
    SystemPromptVersionCreate,
    SystemPromptVersionRead,
)
from app.services.system_prompt_service import SystemPromptService

router = APIRouter(
    prefix="/prompts",
    tags=["system-prompts"],
    responses={404: {"description": "Not found"}},
)


@router.get(
    "",
    response_model=dict,
)
async def list_system_prompts(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """List all system prompts."""
    svc = SystemPromptService(db)
    prompts = await svc.get_system_prompts(skip=skip, limit=limit)
    items = [SystemPromptRead.model_validate(p) for p in prompts]
    return {"items": items}


@router.post(
    "",
    response_model=SystemPromptRead,
    status_code=201,
)
async def create_system_prompt(
    data: SystemPromptCreate,
    db: AsyncSession = Depends(get_db),
) -> SystemPromptRead:
    """Create a new system prompt. The prompt named "default" becomes the chat persona."""
    svc = SystemPromptService(db)
    try:
        prompt = await svc.create_prompt(
            name=data.name,
            initial_content=data.content,
            note=data.note,
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return SystemPromptRead.model_validate(prompt)


@router.get(
    "/{name}/current",
    response_model=SystemPromptCurrentRead,
)
async def get_system_prompt_current(
    name: str,
    db: AsyncSession = Depends(get_db),
) -> SystemPromptCurrentRead:
    """Return the current system prompt content and version info."""
    svc = SystemPromptService(db)
    prompt = await svc.get_system_prompt_by_name(name)
    if prompt is None or prompt.current_version_id is None:
        raise HTTPException(status_code=404, detail="System prompt not found")
    version = await svc.get_current_version(name)
    if version is None:
        raise HTTPException(status_code=404, detail="System prompt version not found")
    return SystemPromptCurrentRead(
        content=str(version.content),
        version_id=version.id,
        version_number=int(version.version_number),
        updated_at=prompt.updated_at,
    )


@router.get(
    "/{name}/versions",
    response_model=dict,
)
async def list_system_prompt_versions(
    name: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """List version history for the given system prompt, newest first."""
    svc = SystemPromptService(db)
    versions = await svc.get_versions(name, skip=skip, limit=limit)
    items = [SystemPromptVersionRead.model_validate(v) for v in versions]
    return {"items": items}


@router.post(
    "/{name}/versions",
    response_model=SystemPromptVersionRead,
    status_code=201,
)
async def create_system_prompt_version(
    name: str,
    data: SystemPromptVersionCreate,
    db: AsyncSession = Depends(get_db),
) -> SystemPromptVersionRead:
    """Create a new version and set it as the current system prompt."""
    svc = SystemPromptService(db)
    version = await svc.create_version(name, content=data.content, note=data.note)
    if version is None:
        raise HTTPException(status_code=404, detail="System prompt not found")
    return SystemPromptVersionRead.model_validate(version)
