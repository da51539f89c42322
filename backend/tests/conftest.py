"""Master test fixtures.

Environment variables are set BEFORE any application imports so that
``config.Settings()`` initialises with test-safe values and never touches
Docker secrets or a real completion service.
"""

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

# ── Set test env vars before any app import ──────────────────────────
os.environ.update({
    "MISTRAL_API_KEY": "test-mistral-key",
    "STORAGE_BACKEND": "memory",
    "DATABASE_URL": "sqlite+aiosqlite://",
})
for _optional in ("TAVILY_API_KEY", "SERPER_API_KEY", "TAVILY_API_KEY_FILE", "SERPER_API_KEY_FILE"):
    os.environ.pop(_optional, None)

import pytest

from httpx import ASGITransport, AsyncClient

# Now safe to import application code
from storage import MemoryStorage, get_storage


def mock_completion(content: str | None = "Hello from LLM", usage: dict | None = None):
    """Return an object that quacks like ``chat.completions.create()`` result."""
    choice = MagicMock()
    choice.message.content = content
    completion = MagicMock()
    completion.choices = [choice]
    completion.usage = SimpleNamespace(**usage) if usage else None
    return completion


@pytest.fixture
def llm_client():
    """Patch the completion client; set ``side_effect``/``return_value`` per test."""
    mock_client = AsyncMock()
    mock_client.chat.completions.create = AsyncMock(return_value=mock_completion("Test reply"))
    with patch("llm.client._get_llm_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
async def test_client(storage: MemoryStorage):
    """HTTPX async client wired to the FastAPI app, with a fresh in-memory store."""
    from main import app

    app.dependency_overrides[get_storage] = lambda: storage
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
