# promptshelf/api/tags.py
"""
Distinct-value routes used to build the filter pickers.
"""
from fastapi import APIRouter, Depends

from promptshelf.api.responses import success
from promptshelf.core.identity import get_current_user_id
from promptshelf.services import prompts as prompt_service


router = APIRouter(prefix="/api", tags=["Tags"])


@router.get("/tags")
async def list_tags(user_id: str = Depends(get_current_user_id)):
    """All tags the caller has used, sorted."""
    return success(await prompt_service.distinct_tags(user_id))


@router.get("/types")
async def list_types(user_id: str = Depends(get_current_user_id)):
    """All prompt types the caller has used, sorted."""
    return success(await prompt_service.distinct_types(user_id))
