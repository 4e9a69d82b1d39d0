# promptshelf/api/prompts.py
"""
Prompt routes.

Thin handlers: resolve the caller, delegate to the prompt service, wrap the
result in the envelope. Errors are converted by the handlers in responses.py.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from starlette.responses import JSONResponse

from promptshelf.api.responses import success
from promptshelf.core.identity import get_current_user_id
from promptshelf.models import CombineRequest, PromptIn
from promptshelf.services import prompts as prompt_service


router = APIRouter(prefix="/api/prompts", tags=["Prompts"])


@router.get("")
async def list_prompts(
    search: Optional[str] = Query(None, description="Case-insensitive title search"),
    types: Optional[str] = Query(None, description="Comma-separated types (any of)"),
    tags: Optional[str] = Query(None, description="Comma-separated tags (all of)"),
    page: Optional[str] = Query(None, description="Page number, 1-based"),
    limit: Optional[str] = Query(None, description="Items per page"),
    user_id: str = Depends(get_current_user_id),
):
    """List the caller's prompts, newest first."""
    items, pagination = await prompt_service.list_prompts(
        user_id, search=search, types=types, tags=tags, page=page, limit=limit
    )
    return success([item.to_public() for item in items], pagination)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_prompt(payload: PromptIn, user_id: str = Depends(get_current_user_id)):
    """Create a prompt owned by the caller."""
    prompt = await prompt_service.create_prompt(user_id, payload)
    return success(prompt.to_public())


@router.post("/combine")
async def combine_prompts(payload: CombineRequest, user_id: str = Depends(get_current_user_id)):
    """
    Combine a Character, Background and/or Pose prompt.

    Returns a preview by default; with `save: true` the result is stored
    as a "Combined" prompt and returned with 201. A `prompt` field saves
    the user's edited text instead of the joined sources.
    """
    if payload.save:
        prompt = await prompt_service.save_combined(user_id, payload)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=success(prompt.to_public()))
    combined = await prompt_service.combine_prompts(user_id, payload)
    return success(combined.to_public())


@router.get("/{prompt_id}")
async def get_prompt(prompt_id: str, user_id: str = Depends(get_current_user_id)):
    prompt = await prompt_service.get_prompt(user_id, prompt_id)
    return success(prompt.to_public())


@router.put("/{prompt_id}")
async def update_prompt(prompt_id: str, payload: PromptIn, user_id: str = Depends(get_current_user_id)):
    """Replace the editable fields of one of the caller's prompts."""
    prompt = await prompt_service.update_prompt(user_id, prompt_id, payload)
    return success(prompt.to_public())


@router.delete("/{prompt_id}")
async def delete_prompt(prompt_id: str, user_id: str = Depends(get_current_user_id)):
    await prompt_service.delete_prompt(user_id, prompt_id)
    return success({})
