"""Integration-test fixtures.

Pre-condition: PostgreSQL and Redis running, `alembic upgrade head` applied.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.
"""

import uuid
from collections.abc import Awaitable, Callable

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from src.main import app

Headers = dict[str, str]


def _steam_id() -> str:
    return str(76561190000000000 + uuid.uuid4().int % 10_000_000_000)


async def identity_login(client: AsyncClient, steam_id: str | None = None) -> tuple[Headers, int]:
    """Resolve an identity through the bridge endpoint; returns (auth headers, user id)."""
    steam_id = steam_id or _steam_id()
    resp = await client.post(
        "/api/v1/auth/identity",
        json={"steam_id": steam_id, "display_name": f"user_{steam_id[-6:]}"},
        headers={"X-Identity-Bridge-Key": settings.IDENTITY_BRIDGE_SECRET},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    return {"Authorization": f"Bearer {data['access_token']}"}, int(data["user"]["user_id"])


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin_headers(client: AsyncClient) -> Headers:
    headers, _ = await identity_login(client, settings.ADMIN_STEAM_IDS[0])
    return headers


@pytest_asyncio.fixture(loop_scope="session")
async def new_user(client: AsyncClient) -> Callable[[], Awaitable[tuple[Headers, int]]]:
    async def _make() -> tuple[Headers, int]:
        return await identity_login(client)

    return _make


@pytest_asyncio.fixture(loop_scope="session")
async def fund(
    client: AsyncClient, admin_headers: Headers
) -> Callable[[int, int], Awaitable[None]]:
    async def _fund(user_id: int, cents: int) -> None:
        resp = await client.post(
            f"/api/v1/admin/users/{user_id}/deposit",
            json={"amount_cents": cents},
            headers=admin_headers,
        )
        assert resp.status_code == 200, resp.text

    return _fund


@pytest_asyncio.fixture(loop_scope="session")
async def list_item(client: AsyncClient) -> Callable[..., Awaitable[int]]:
    async def _list(seller: Headers, price: str, name: str = "AK-47 | Redline") -> int:
        resp = await client.post(
            "/api/v1/listings",
            json={
                "name": name,
                "weapon": name.split(" | ")[0],
                "category": "Rifle",
                "rarity": "Classified",
                "wear": "Field-Tested",
                "price": price,
                "float_value": "0.25",
            },
            headers=seller,
        )
        assert resp.status_code == 201, resp.text
        return int(resp.json()["data"]["id"])

    return _list
