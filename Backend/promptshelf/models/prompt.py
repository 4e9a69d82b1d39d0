from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from beanie import Document
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel


TITLE_MAX_LENGTH = 100


class PromptType(str, Enum):
    """Types accepted on the primary create/update path."""
    CHARACTER = "Character"
    BACKGROUND = "Background"
    POSE = "Pose"


# Written only by the recombination path; never accepted by PromptIn
COMBINED_TYPE = "Combined"

PROMPT_TYPES = [t.value for t in PromptType]

# Tags a saved combination gets when the request names none
COMBINED_TAGS = ["combined", "generated"]


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision MongoDB stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def as_utc(value: datetime) -> datetime:
    # Motor returns naive datetimes unless the client is tz_aware
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def clean_tags(tags: Optional[List[Any]]) -> List[str]:
    """Trim every tag; reject blank ones. Order and duplicates are kept."""
    if tags is None:
        return []
    cleaned = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValueError("Tags must be strings")
        tag = tag.strip()
        if not tag:
            raise ValueError("Tags cannot be empty")
        cleaned.append(tag)
    return cleaned


def clean_image(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Prompt(Document):
    """
    A stored prompt.

    `type` is open text at the storage layer: the enum is enforced by
    PromptIn on the primary write path, and the recombination path writes
    COMBINED_TYPE directly.
    """

    title: str
    prompt: str
    type: str
    image: Optional[str] = None
    owner_id: str
    tags: List[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "prompts"
        indexes = [
            IndexModel([("owner_id", ASCENDING), ("created_at", DESCENDING)]),
            IndexModel([("owner_id", ASCENDING), ("tags", ASCENDING)]),
        ]

    def to_public(self) -> Dict[str, Any]:
        """camelCase JSON shape returned by the API."""
        return {
            "id": str(self.id),
            "title": self.title,
            "prompt": self.prompt,
            "type": self.type,
            "image": self.image,
            "tags": list(self.tags),
            "ownerId": self.owner_id,
            "createdAt": as_utc(self.created_at).isoformat(timespec="milliseconds"),
            "updatedAt": as_utc(self.updated_at).isoformat(timespec="milliseconds"),
        }


class PromptIn(BaseModel):
    """Editable fields for create and full-document update."""

    title: str
    prompt: str
    type: str
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        if len(value) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        return value

    @field_validator("prompt")
    @classmethod
    def _check_prompt(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Prompt is required")
        return value

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Type is required")
        if value not in PROMPT_TYPES:
            raise ValueError(f"Type must be one of: {', '.join(PROMPT_TYPES)}")
        return value

    @field_validator("image", mode="before")
    @classmethod
    def _check_image(cls, value: Any) -> Any:
        if isinstance(value, str):
            return clean_image(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _check_tags(cls, value: Any) -> Any:
        if value is None or isinstance(value, list):
            return clean_tags(value)
        return value


class CombineRequest(BaseModel):
    """Selection for the recombination workflow, one optional id per slot."""

    model_config = ConfigDict(populate_by_name=True)

    character_id: Optional[str] = Field(default=None, alias="characterId")
    background_id: Optional[str] = Field(default=None, alias="backgroundId")
    pose_id: Optional[str] = Field(default=None, alias="poseId")
    # Text edited by the user before saving; replaces the joined sources
    prompt: Optional[str] = None
    save: bool = False
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("character_id", "background_id", "pose_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("prompt", mode="before")
    @classmethod
    def _check_prompt(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Prompt cannot be empty")
        return value

    @field_validator("image", mode="before")
    @classmethod
    def _check_image(cls, value: Any) -> Any:
        if isinstance(value, str):
            return clean_image(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _check_tags(cls, value: Any) -> Any:
        if value is None or isinstance(value, list):
            return clean_tags(value)
        return value
