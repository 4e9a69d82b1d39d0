from .prompt import (
    Prompt,
    PromptIn,
    PromptType,
    CombineRequest,
    COMBINED_TAGS,
    COMBINED_TYPE,
    PROMPT_TYPES,
    TITLE_MAX_LENGTH,
    utc_now,
)

__all__ = [
    "Prompt",
    "PromptIn",
    "PromptType",
    "CombineRequest",
    "COMBINED_TAGS",
    "COMBINED_TYPE",
    "PROMPT_TYPES",
    "TITLE_MAX_LENGTH",
    "utc_now",
]
