# promptshelf/core/__init__.py
"""
Core module - configuration, logging, errors, identity.
"""
from .config import settings, Settings
from .exceptions import (
    PromptShelfError,
    UnauthenticatedError,
    PromptNotFoundError,
    ValidationFailedError,
    InvalidQueryError,
    StoreFailureError,
)
from .logging import log

__all__ = [
    "settings",
    "Settings",
    "PromptShelfError",
    "UnauthenticatedError",
    "PromptNotFoundError",
    "ValidationFailedError",
    "InvalidQueryError",
    "StoreFailureError",
    "log",
]
