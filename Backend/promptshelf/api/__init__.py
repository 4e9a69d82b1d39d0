# promptshelf/api/__init__.py
"""
API module - All route handlers.
"""
from . import health, prompts, tags

__all__ = [
    "health",
    "prompts",
    "tags",
]
