# tests/conftest.py
"""
Shared pytest fixtures for PromptShelf tests.

Provides:
- In-memory MongoDB (mongomock-motor) wired through Beanie
- Async HTTP client against the FastAPI app
- Owner identities and a prompt factory
"""
import os

# Must be set before the app (and its rate limiter) is imported
os.environ.setdefault("RATE_LIMIT", "100000/minute")

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from promptshelf.db import connect_db, disconnect_db, is_connected
from promptshelf.main import app
from promptshelf.models import Prompt
from promptshelf.services import prompts as prompt_service


fake = Faker()

ALICE = "user_alice_01"
BOB = "user_bob_02"


def auth(user_id: str = ALICE) -> dict:
    return {"X-User-Id": user_id}


# ═══════════════════════════════════════════════════════
# FIXTURES - Database
# ═══════════════════════════════════════════════════════

@pytest.fixture
async def db():
    """Fresh in-memory database per test."""
    await connect_db(AsyncMongoMockClient())
    assert is_connected()
    await Prompt.delete_all()
    yield
    await disconnect_db()


# ═══════════════════════════════════════════════════════
# FIXTURES - HTTP
# ═══════════════════════════════════════════════════════

@pytest.fixture
async def async_client(db):
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def client(async_client):
    """Alias for async_client - use either name in tests."""
    return async_client


# ═══════════════════════════════════════════════════════
# FIXTURES - Data
# ═══════════════════════════════════════════════════════

@pytest.fixture
def prompt_payload():
    """Build a valid create/update body; keyword overrides win."""
    def _build(**overrides):
        payload = {
            "title": fake.sentence(nb_words=3).rstrip("."),
            "prompt": fake.paragraph(nb_sentences=2),
            "type": "Character",
            "tags": [],
        }
        payload.update(overrides)
        return payload
    return _build


@pytest.fixture
def make_prompt(db, prompt_payload):
    """Create a prompt through the service layer."""
    async def _make(owner_id: str = ALICE, **overrides) -> Prompt:
        return await prompt_service.create_prompt(owner_id, prompt_payload(**overrides))
    return _make
