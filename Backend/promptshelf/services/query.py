# promptshelf/services/query.py
"""
List query builder.

Pure translation of request parameters into a MongoDB filter plus a
pagination plan. No I/O.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pymongo import DESCENDING

from promptshelf.core.config import settings
from promptshelf.core.exceptions import InvalidQueryError


# Newest first; _id breaks ties between prompts created in the same millisecond
SORT_ORDER = [("created_at", DESCENDING), ("_id", DESCENDING)]

IntParam = Union[int, str, None]


@dataclass
class PromptQuery:
    """Store filter and page window for a list request."""
    filter: Dict[str, Any]
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def split_csv(raw: Optional[str]) -> List[str]:
    """Split a comma-delimited parameter, trimming and dropping empty segments."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _parse_positive_int(name: str, raw: IntParam, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, str):
        raw = raw.strip()
        if raw == "":
            return default
        try:
            value = int(raw)
        except ValueError:
            raise InvalidQueryError(name, raw, "must be an integer")
    else:
        value = raw
    if value < 1:
        raise InvalidQueryError(name, raw, "must be 1 or greater")
    return value


def build_prompt_query(
    owner_id: str,
    search: Optional[str] = None,
    types: Optional[str] = None,
    tags: Optional[str] = None,
    page: IntParam = None,
    limit: IntParam = None,
) -> PromptQuery:
    """
    Build the owner-scoped filter and page window.

    - search: case-insensitive literal substring match on title
    - types:  comma list, document type must be ANY of them
    - tags:   comma list, document must carry ALL of them
    - page:   1-based, default 1
    - limit:  page size, default and maximum from settings
    """
    if not owner_id:
        raise ValueError("owner_id is required")

    query: Dict[str, Any] = {"owner_id": owner_id}

    if search and search.strip():
        query["title"] = {"$regex": re.escape(search.strip()), "$options": "i"}

    type_list = split_csv(types)
    if type_list:
        query["type"] = {"$in": type_list}

    tag_list = split_csv(tags)
    if tag_list:
        query["tags"] = {"$all": tag_list}

    page_number = _parse_positive_int("page", page, 1)
    page_size = _parse_positive_int("limit", limit, settings.pagination.default_limit)
    if page_size > settings.pagination.max_limit:
        raise InvalidQueryError(
            "limit", limit, f"must not exceed {settings.pagination.max_limit}"
        )

    return PromptQuery(filter=query, page=page_number, limit=page_size)


def build_pagination(total_count: int, page: int, limit: int) -> Dict[str, Any]:
    """Pagination metadata for the list envelope."""
    total_pages = math.ceil(total_count / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalCount": total_count,
        "limit": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }
