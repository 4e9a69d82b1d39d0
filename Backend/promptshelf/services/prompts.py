# promptshelf/services/prompts.py
"""
Prompt Service - the owner-scoped CRUD surface.

Every public function takes `owner_id` first and every store call is built
from an owner-scoped filter, so no code path can reach another user's data.
Unexpected store errors are logged and re-raised as StoreFailureError.
"""
import functools
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple, Union

from beanie import PydanticObjectId, UpdateResponse
from bson import ObjectId
from pydantic import BaseModel, ValidationError

from promptshelf.core.exceptions import (
    PromptNotFoundError,
    PromptShelfError,
    StoreFailureError,
    ValidationFailedError,
)
from promptshelf.core.logging import log
from promptshelf.lib.monitoring import record_write
from promptshelf.models import (
    COMBINED_TAGS,
    COMBINED_TYPE,
    TITLE_MAX_LENGTH,
    CombineRequest,
    Prompt,
    PromptIn,
    PromptType,
    utc_now,
)
from promptshelf.models.prompt import as_utc
from promptshelf.services.query import SORT_ORDER, IntParam, build_pagination, build_prompt_query


# Slot order of a combined prompt
COMBINE_SLOTS = (
    ("character_id", PromptType.CHARACTER),
    ("background_id", PromptType.BACKGROUND),
    ("pose_id", PromptType.POSE),
)

# Words that place a prompt in a slot when found in its type
SLOT_KEYWORDS = {
    PromptType.CHARACTER: ("character", "person"),
    PromptType.BACKGROUND: ("background", "scene"),
    PromptType.POSE: ("pose", "action"),
}


class _TagsView(BaseModel):
    tags: List[str] = []


class _TypeView(BaseModel):
    type: str


@dataclass
class CombinedPrompt:
    """Result of recombining up to one prompt per slot."""
    title: str
    prompt: str
    source_ids: List[str] = field(default_factory=list)
    type: str = COMBINED_TYPE

    def to_public(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "prompt": self.prompt,
            "type": self.type,
            "sources": list(self.source_ids),
        }


def store_operation(failure_message: str):
    """
    Translate unexpected store errors into StoreFailureError.

    Domain errors (not found, validation) pass through untouched.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(owner_id: str, *args, **kwargs):
            if not owner_id:
                raise ValueError("owner_id is required")
            try:
                return await func(owner_id, *args, **kwargs)
            except PromptShelfError:
                raise
            except Exception as e:
                log("STORE", f"{func.__name__} failed: {type(e).__name__}: {e}", user_id=owner_id)
                raise StoreFailureError(failure_message, e) from e
        return wrapper
    return decorator


def _owned(owner_id: str, prompt_id: str) -> Dict[str, Any]:
    """Filter matching one prompt by id AND owner. Malformed ids match nothing."""
    if not prompt_id or not ObjectId.is_valid(prompt_id):
        raise PromptNotFoundError(str(prompt_id))
    return {"_id": PydanticObjectId(prompt_id), "owner_id": owner_id}


def _validated(payload: Union[PromptIn, Dict[str, Any]]) -> PromptIn:
    if isinstance(payload, PromptIn):
        return payload
    try:
        return PromptIn.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailedError.from_errors(e.errors()) from e


def _fits_slot(prompt: Prompt, slot: PromptType) -> bool:
    kind = prompt.type.lower()
    if any(word in kind for word in SLOT_KEYWORDS[slot]):
        return True
    name = slot.value.lower()
    return any(name in tag.lower() for tag in prompt.tags)


async def _find_owned(owner_id: str, prompt_id: str) -> Prompt:
    prompt = await Prompt.find_one(_owned(owner_id, prompt_id))
    if prompt is None:
        raise PromptNotFoundError(prompt_id)
    return prompt


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

@store_operation("Failed to fetch prompts")
async def list_prompts(
    owner_id: str,
    search: Optional[str] = None,
    types: Optional[str] = None,
    tags: Optional[str] = None,
    page: IntParam = None,
    limit: IntParam = None,
) -> Tuple[List[Prompt], Dict[str, Any]]:
    """
    One page of the owner's prompts, newest first, plus pagination metadata.

    An empty result is not an error: items is [] and totalPages is 0.
    """
    query = build_prompt_query(owner_id, search=search, types=types, tags=tags, page=page, limit=limit)
    log("QUERY", f"filter={query.filter} skip={query.skip} limit={query.limit}", user_id=owner_id)

    total_count = await Prompt.find(query.filter).count()
    items = await (
        Prompt.find(query.filter)
        .sort(SORT_ORDER)
        .skip(query.skip)
        .limit(query.limit)
        .to_list()
    )
    return items, build_pagination(total_count, query.page, query.limit)


@store_operation("Failed to fetch prompt")
async def get_prompt(owner_id: str, prompt_id: str) -> Prompt:
    return await _find_owned(owner_id, prompt_id)


@store_operation("Failed to create prompt")
async def create_prompt(owner_id: str, payload: Union[PromptIn, Dict[str, Any]]) -> Prompt:
    data = _validated(payload)
    now = utc_now()
    prompt = Prompt(
        **data.model_dump(),
        owner_id=owner_id,
        created_at=now,
        updated_at=now,
    )
    await prompt.insert()
    record_write("create")
    log("PROMPTS", f"Created prompt {prompt.id} ({prompt.type})", user_id=owner_id)
    return prompt


@store_operation("Failed to update prompt")
async def update_prompt(owner_id: str, prompt_id: str, payload: Union[PromptIn, Dict[str, Any]]) -> Prompt:
    """
    Replace every editable field of an owned prompt.

    The write is a single owner-scoped find-and-update, so a prompt deleted
    (or owned by someone else) is reported as not found, never re-created.
    """
    data = _validated(payload)
    owned = _owned(owner_id, prompt_id)

    current = await Prompt.find_one(owned)
    if current is None:
        raise PromptNotFoundError(prompt_id)

    # updatedAt must move forward even within the same millisecond
    updated_at = max(utc_now(), as_utc(current.updated_at) + timedelta(milliseconds=1))

    result = await Prompt.find_one(owned).update(
        {"$set": {**data.model_dump(), "updated_at": updated_at}},
        response_type=UpdateResponse.NEW_DOCUMENT,
    )
    if result is None:
        raise PromptNotFoundError(prompt_id)
    record_write("update")
    log("PROMPTS", f"Updated prompt {prompt_id}", user_id=owner_id)
    return result


@store_operation("Failed to delete prompt")
async def delete_prompt(owner_id: str, prompt_id: str) -> None:
    result = await Prompt.find_one(_owned(owner_id, prompt_id)).delete()
    if result is None or result.deleted_count == 0:
        raise PromptNotFoundError(prompt_id)
    record_write("delete")
    log("PROMPTS", f"Deleted prompt {prompt_id}", user_id=owner_id)


# ---------------------------------------------------------------------------
# DISTINCT VALUES
# ---------------------------------------------------------------------------

@store_operation("Failed to fetch tags")
async def distinct_tags(owner_id: str) -> List[str]:
    """Every tag the owner uses, de-duplicated and sorted ascending."""
    views = await Prompt.find({"owner_id": owner_id}).project(_TagsView).to_list()
    return sorted({tag for view in views for tag in view.tags})


@store_operation("Failed to fetch types")
async def distinct_types(owner_id: str) -> List[str]:
    """Every prompt type the owner uses, sorted ascending."""
    views = await Prompt.find({"owner_id": owner_id}).project(_TypeView).to_list()
    return sorted({view.type for view in views})


# ---------------------------------------------------------------------------
# RECOMBINATION
# ---------------------------------------------------------------------------

@store_operation("Failed to combine prompts")
async def combine_prompts(owner_id: str, request: CombineRequest) -> CombinedPrompt:
    """
    Join one Character, Background and/or Pose prompt into a single text.

    Sources are read owner-scoped; each must fit its slot by type or tag.
    """
    if not any(getattr(request, attr) for attr, _ in COMBINE_SLOTS):
        raise ValidationFailedError("Select at least one prompt to combine")

    title_parts: List[str] = []
    text_parts: List[str] = []
    source_ids: List[str] = []
    for attr, slot in COMBINE_SLOTS:
        prompt_id = getattr(request, attr)
        if not prompt_id:
            title_parts.append(slot.value)
            continue
        source = await _find_owned(owner_id, prompt_id)
        if not _fits_slot(source, slot):
            raise ValidationFailedError(f"Prompt '{source.title}' is not a {slot.value} prompt")
        title_parts.append(source.title)
        text_parts.append(source.prompt)
        source_ids.append(str(source.id))

    title = f"Combined: {' + '.join(title_parts)}"
    log("COMBINE", f"Combined {len(source_ids)} prompt(s)", user_id=owner_id)
    return CombinedPrompt(
        title=title[:TITLE_MAX_LENGTH].rstrip(),
        prompt=", ".join(text_parts),
        source_ids=source_ids,
    )


@store_operation("Failed to save combined prompt")
async def save_combined(owner_id: str, request: CombineRequest) -> Prompt:
    """
    Combine and insert the result with type "Combined".

    An edited `prompt` on the request replaces the joined text. Without
    tags the result is tagged COMBINED_TAGS.

    This is the one write path that bypasses the PromptIn type enum.
    """
    combined = await combine_prompts(owner_id, request)
    now = utc_now()
    prompt = Prompt(
        title=combined.title,
        prompt=request.prompt or combined.prompt,
        type=combined.type,
        image=request.image,
        tags=request.tags or list(COMBINED_TAGS),
        owner_id=owner_id,
        created_at=now,
        updated_at=now,
    )
    await prompt.insert()
    record_write("combine")
    log("COMBINE", f"Saved combined prompt {prompt.id}", user_id=owner_id)
    return prompt
