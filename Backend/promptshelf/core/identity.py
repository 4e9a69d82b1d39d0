# promptshelf/core/identity.py
"""
Identity Boundary

RULES:
1. User is a SYSTEM entity, not a domain entity
2. This service never authenticates; it only reads the identity resolved
   upstream (auth proxy / identity provider)
3. Domain records reference owner_id, never manage users
4. owner_id is NEVER taken from a request body
"""
from typing import Callable, Optional

from fastapi import Request

from promptshelf.core.config import settings
from promptshelf.core.exceptions import UnauthenticatedError
from promptshelf.core.logging import log


IdentityResolver = Callable[[Request], Optional[str]]


def header_identity_resolver(request: Request) -> Optional[str]:
    """
    Default resolver: trusted identity header set by the auth proxy.

    Returns None when the header is missing or blank.
    """
    raw = request.headers.get(settings.auth.user_header)
    if raw is None:
        return None
    user_id = raw.strip()
    return user_id or None


def resolve_user_id(request: Request) -> Optional[str]:
    """
    Resolve the caller's user id, or None if unauthenticated.

    A custom resolver can be installed on `app.state.identity_resolver`.
    """
    resolver: IdentityResolver = getattr(
        request.app.state, "identity_resolver", header_identity_resolver
    )
    return resolver(request)


async def get_current_user_id(request: Request) -> str:
    """FastAPI dependency: the authenticated owner id, or 401."""
    user_id = resolve_user_id(request)
    if not user_id:
        log("AUTH", f"Rejected unauthenticated {request.method} {request.url.path}")
        raise UnauthenticatedError()
    return user_id
