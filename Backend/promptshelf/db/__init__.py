# promptshelf/db/__init__.py
"""
Database module.
"""
from typing import Any, Optional

from promptshelf.core.config import settings
from promptshelf.core.logging import log

# Motor client instance
_client = None
_db = None
_connection_error: Optional[str] = None


async def connect_db(client: Optional[Any] = None):
    """
    Connect to MongoDB and initialize Beanie.

    `client` may be any Motor-compatible client (tests pass an in-memory
    one); when omitted a Motor client is created from settings and pinged.

    If MongoDB is not available, stores the error for later retrieval
    rather than crashing startup. Requests then fail as store failures.
    """
    global _client, _db, _connection_error
    try:
        from beanie import init_beanie
        from promptshelf.models import Prompt

        if client is None:
            from motor.motor_asyncio import AsyncIOMotorClient

            _client = AsyncIOMotorClient(
                settings.database.url,
                serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
            )
            # Fail fast if MongoDB is not running
            await _client.admin.command("ping")
        else:
            _client = client

        try:
            _db = _client.get_default_database()
        except Exception:
            _db = _client[settings.database.name]

        log("DB", "Connected to MongoDB")

        await init_beanie(database=_db, document_models=[Prompt])
        log("DB", "Beanie ODM initialized")
        _connection_error = None
    except Exception as e:
        error_msg = str(e)
        log("DB", f"MongoDB not available: {error_msg}")
        log("DB", f"Database features are disabled until {settings.database.url} is reachable")
        if _client is not None and client is None:
            _client.close()
        _client = None
        _db = None
        _connection_error = error_msg


async def disconnect_db():
    """Disconnect from MongoDB."""
    global _client, _db
    if _client:
        _client.close()
        log("DB", "Disconnected from MongoDB")
    _client = None
    _db = None


def is_connected() -> bool:
    """Check if database is connected."""
    return _db is not None


def get_connection_error() -> Optional[str]:
    """Get connection error message if connection failed."""
    return _connection_error
