# promptshelf/api/health.py
"""
Health check endpoints.
"""
from datetime import datetime, timezone
from fastapi import APIRouter

from promptshelf import __version__
from promptshelf.db import get_connection_error, is_connected

router = APIRouter(tags=["Health"])


@router.get("/healthz")
async def healthz():
    """Simple liveness check."""
    return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/api/health")
async def api_health():
    """API health check, including database availability."""
    database = {"connected": is_connected()}
    error = get_connection_error()
    if error:
        database["error"] = error
    return {
        "status": "healthy" if database["connected"] else "degraded",
        "version": __version__,
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
