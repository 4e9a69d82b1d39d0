# promptshelf/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


@dataclass
class DatabaseSettings:
    """MongoDB configuration."""
    url: str = field(default_factory=lambda: os.getenv("MONGODB_URL", "mongodb://localhost:27017"))
    # Used when the URL carries no default database
    name: str = field(default_factory=lambda: os.getenv("MONGODB_DB", "promptshelf"))
    server_selection_timeout_ms: int = 5000


@dataclass
class PaginationSettings:
    """List endpoint paging limits."""
    default_limit: int = field(default_factory=lambda: int(os.getenv("DEFAULT_PAGE_SIZE", "30")))
    max_limit: int = field(default_factory=lambda: int(os.getenv("MAX_PAGE_SIZE", "100")))


@dataclass
class AuthSettings:
    """
    Identity resolution.

    Authentication itself happens upstream (auth proxy / identity provider);
    this service only reads the resolved user id from a trusted header.
    """
    user_header: str = field(default_factory=lambda: os.getenv("AUTH_USER_HEADER", "X-User-Id"))


@dataclass
class PathSettings:
    """Path configuration."""
    frontend_dist: Path = field(default_factory=lambda: Path(os.getenv(
        "FRONTEND_DIST_PATH",
        str(Path(__file__).parent.parent.parent.parent / "Frontend" / "dist")
    )))


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw or raw.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Main application settings."""
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    pagination: PaginationSettings = field(default_factory=PaginationSettings)
    auth: AuthSettings = field(default_factory=AuthSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    cors_origins: List[str] = field(default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS")))
    rate_limit: str = field(default_factory=lambda: os.getenv("RATE_LIMIT", "100/minute"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", 8000)))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")


# Singleton instance
settings = Settings()
