"""Unit tests for RequestLogMiddleware and RateLimitMiddleware on a throwaway app."""

import logging
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from src.sm_gateway.auth.jwt_handler import create_access_token
from src.sm_gateway.middleware.rate_limit import RateLimitMiddleware
from src.sm_gateway.middleware.request_log import RequestLogMiddleware


def _fake_redis() -> AsyncMock:
    counts: dict[str, int] = {}

    async def incr(key: str) -> int:
        counts[key] = counts.get(key, 0) + 1
        return counts[key]

    redis = AsyncMock()
    redis.incr = AsyncMock(side_effect=incr)
    redis.expire = AsyncMock(return_value=True)
    return redis


def _build_app(redis: AsyncMock, limit: int = 2) -> FastAPI:
    app = FastAPI()

    async def factory() -> AsyncMock:
        return redis

    app.add_middleware(
        RateLimitMiddleware, limits={("POST", "/checkout"): limit}, redis_factory=factory
    )
    app.add_middleware(RequestLogMiddleware)

    @app.post("/checkout")
    async def checkout() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/listings")
    async def listings() -> dict[str, bool]:
        return {"ok": True}

    return app


async def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestRequestLog:
    async def test_generates_request_id_header(self) -> None:
        async with await _client(_build_app(_fake_redis())) as client:
            resp = await client.get("/listings")
        assert resp.headers["X-Request-ID"].startswith("req_")

    async def test_reuses_upstream_request_id(self) -> None:
        async with await _client(_build_app(_fake_redis())) as client:
            resp = await client.get("/listings", headers={"X-Request-ID": "bridge-123"})
        assert resp.headers["X-Request-ID"] == "bridge-123"

    async def test_oversized_upstream_id_replaced(self) -> None:
        async with await _client(_build_app(_fake_redis())) as client:
            resp = await client.get("/listings", headers={"X-Request-ID": "x" * 200})
        assert resp.headers["X-Request-ID"].startswith("req_")

    async def test_logs_access_line(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="sm.request"):
            async with await _client(_build_app(_fake_redis())) as client:
                await client.get("/listings")
        assert any("[GET] /listings -> 200" in r.getMessage() for r in caplog.records)


class TestRateLimit:
    async def test_allows_up_to_limit_then_429(self) -> None:
        redis = _fake_redis()
        async with await _client(_build_app(redis, limit=2)) as client:
            first = await client.post("/checkout")
            second = await client.post("/checkout")
            third = await client.post("/checkout")

        assert first.status_code == 200
        assert second.status_code == 200
        assert third.status_code == 429
        assert third.headers["Retry-After"] == "60"
        body = third.json()
        assert body["code"] == 9001
        assert body["data"] == {"retry_after": 60}
        redis.expire.assert_awaited_once()

    async def test_unlimited_paths_skip_redis(self) -> None:
        redis = _fake_redis()
        async with await _client(_build_app(redis, limit=1)) as client:
            for _ in range(3):
                assert (await client.get("/listings")).status_code == 200
        redis.incr.assert_not_awaited()

    async def test_key_uses_token_subject(self) -> None:
        redis = _fake_redis()
        token = create_access_token("42")
        async with await _client(_build_app(redis)) as client:
            await client.post("/checkout", headers={"Authorization": f"Bearer {token}"})
        redis.incr.assert_awaited_once_with("ratelimit:user:42:/checkout")

    async def test_invalid_token_falls_back_to_ip(self) -> None:
        redis = _fake_redis()
        async with await _client(_build_app(redis)) as client:
            await client.post(
                "/checkout",
                headers={"Authorization": "Bearer garbage"},
            )
        redis.incr.assert_awaited_once_with("ratelimit:ip:127.0.0.1:/checkout")

    async def test_forwarded_header_does_not_pick_the_bucket(self) -> None:
        redis = _fake_redis()
        async with await _client(_build_app(redis, limit=2)) as client:
            codes = []
            for n in range(3):
                resp = await client.post("/checkout", headers={"X-Forwarded-For": f"10.0.0.{n}"})
                codes.append(resp.status_code)
        assert codes == [200, 200, 429]
        keys = {c.args[0] for c in redis.incr.await_args_list}
        assert keys == {"ratelimit:ip:127.0.0.1:/checkout"}

    async def test_redis_down_fails_open(self) -> None:
        redis = AsyncMock()
        redis.incr = AsyncMock(side_effect=RedisConnectionError("refused"))
        async with await _client(_build_app(redis, limit=1)) as client:
            resp = await client.post("/checkout")
        assert resp.status_code == 200
