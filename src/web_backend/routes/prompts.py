"""
Prompt history API routes.

Saved prompts of the signed-in user: list, count, search, fetch, list
versions and delete.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from ..config import settings
from ..database.connection import get_db
from ..schemas.prompt import (
    PromptResponse,
    PromptListResponse,
    PromptCountResponse,
    PromptDeleteResponse,
)
from ..services.auth import CurrentUser, require_user
from ..services.prompt_service import PromptService

router = APIRouter()


def get_prompt_service(db: AsyncSession = Depends(get_db)) -> PromptService:
    """Dependency to get prompt service."""
    return PromptService(db)


@router.get("", response_model=PromptListResponse)
async def list_prompts(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, le=200, description="Items per page"),
    user: CurrentUser = Depends(require_user),
    service: PromptService = Depends(get_prompt_service),
):
    """Latest version of each saved prompt, newest first."""
    size = page_size or settings.HISTORY_PAGE_SIZE
    prompts = await service.list_latest(user.id, limit=size, offset=(page - 1) * size)
    total = await service.count(user.id)
    return PromptListResponse(
        prompts=[PromptResponse.model_validate(p) for p in prompts],
        total=total,
    )


@router.get("/count", response_model=PromptCountResponse)
async def count_prompts(
    user: CurrentUser = Depends(require_user),
    service: PromptService = Depends(get_prompt_service),
):
    """Number of saved prompt families."""
    return PromptCountResponse(count=await service.count(user.id))


@router.get("/search", response_model=List[PromptResponse])
async def search_prompts(
    q: str = Query("", description="Text to look for"),
    user: CurrentUser = Depends(require_user),
    service: PromptService = Depends(get_prompt_service),
):
    """Search original inputs and generated prompts."""
    prompts = await service.search(user.id, q, limit=settings.HISTORY_PAGE_SIZE)
    return [PromptResponse.model_validate(p) for p in prompts]


@router.get("/{prompt_id}", response_model=PromptResponse)
async def get_prompt(
    prompt_id: str,
    user: CurrentUser = Depends(require_user),
    service: PromptService = Depends(get_prompt_service),
):
    """Get one saved version."""
    return PromptResponse.model_validate(await service.get(prompt_id, user.id))


@router.get("/{prompt_id}/versions", response_model=List[PromptResponse])
async def list_prompt_versions(
    prompt_id: str,
    user: CurrentUser = Depends(require_user),
    service: PromptService = Depends(get_prompt_service),
):
    """All versions of the family containing prompt_id, oldest first."""
    versions = await service.list_versions(prompt_id, user.id)
    return [PromptResponse.model_validate(v) for v in versions]


@router.delete("/{prompt_id}", response_model=PromptDeleteResponse)
async def delete_prompt(
    prompt_id: str,
    user: CurrentUser = Depends(require_user),
    service: PromptService = Depends(get_prompt_service),
):
    """Delete a version; deleting a root deletes the whole family."""
    return PromptDeleteResponse(deleted=await service.delete(prompt_id, user.id))
