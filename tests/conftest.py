"""Shared test fixtures."""

import os

# Required settings have no defaults; set them before anything imports config.settings
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-not-for-production")
os.environ.setdefault("IDENTITY_BRIDGE_SECRET", "test-bridge-secret")
os.environ.setdefault("ADMIN_STEAM_IDS", '["76561190000000001"]')

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
