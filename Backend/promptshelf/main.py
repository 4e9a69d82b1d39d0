# promptshelf/main.py
"""
PromptShelf Backend
"""
import uvicorn
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import FileResponse

# Rate limiting
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from promptshelf import __version__
from promptshelf.core.config import settings
from promptshelf.core.logging import log
from promptshelf.api.responses import register_error_handlers


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    log("STARTUP", f"PromptShelf {__version__} starting...")

    from promptshelf.db import connect_db, disconnect_db
    await connect_db()

    yield

    log("STARTUP", "Shutting down...")
    await disconnect_db()


# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(
    title="PromptShelf",
    version=__version__,
    lifespan=lifespan,
)

register_error_handlers(app)

# Monitoring
from promptshelf.lib.monitoring import register_monitoring
register_monitoring(app)

if settings.cors_origins == ["*"] and not settings.debug:
    log("SECURITY", "Using allow_origins=['*'] - consider setting CORS_ORIGINS in production")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate Limiting - per client IP, configure via RATE_LIMIT (e.g., "50/minute")
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
log("SECURITY", f"Rate limiting enabled: {settings.rate_limit}")


# ---------------------------------------------------------------------------
# API ROUTES
# ---------------------------------------------------------------------------

from promptshelf.api import health, prompts, tags

app.include_router(health.router)
app.include_router(prompts.router)
app.include_router(tags.router)


# ---------------------------------------------------------------------------
# STATIC FILES
# ---------------------------------------------------------------------------

def resolve_frontend_file(dist: Path, full_path: str) -> Path:
    """
    Map a request path to a file inside `dist`.

    Anything that resolves outside `dist`, or is not a file, falls back
    to index.html so client-side routes still load.
    """
    root = dist.resolve()
    file_path = (root / full_path).resolve()
    if file_path.is_relative_to(root) and file_path.is_file():
        return file_path
    return root / "index.html"


def mount_frontend(app: FastAPI, dist: Path) -> None:
    """Serve a pre-built SPA bundle from `dist`."""
    log("STARTUP", f"Serving frontend from: {dist}")

    assets_path = dist / "assets"
    if assets_path.exists():
        app.mount("/assets", StaticFiles(directory=assets_path), name="assets")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(request: Request, full_path: str):
        return FileResponse(resolve_frontend_file(dist, full_path))


if settings.paths.frontend_dist.exists():
    mount_frontend(app, settings.paths.frontend_dist)


# ---------------------------------------------------------------------------
# RUN
# ---------------------------------------------------------------------------

def run():
    """Console entry point."""
    uvicorn.run(
        "promptshelf.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
