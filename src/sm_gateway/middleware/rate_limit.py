"""Checkout rate limiting middleware.

Fixed-window counter in Redis: INCR + EXPIRE on
    "ratelimit:{subject}:{endpoint_group}"
where subject is the bearer token's user id, or the client IP for
unauthenticated calls. The IP is the socket peer; X-Forwarded-For is only
honoured when uvicorn runs with --proxy-headers behind a trusted proxy,
which rewrites the peer address before this middleware sees it.
Only the paths in `limits` are counted.

Redis being unreachable never blocks a checkout: the limiter logs and lets
the request through.
"""

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from src.sm_common.errors import AppError, RateLimitError
from src.sm_common.redis_client import get_redis
from src.sm_common.response import error_response
from src.sm_gateway.auth.jwt_handler import decode_token

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


def _client_subject(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        try:
            payload = decode_token(auth[7:], expected_type="access")
            return f"user:{payload['sub']}"
        except AppError:
            pass  # invalid token: fall back to IP, the route itself will reject it
    return f"ip:{request.client.host if request.client else 'unknown'}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limits: dict[tuple[str, str], int],
        redis_factory: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        # {(method, path): max requests per window}
        self._limits = limits
        self._redis_factory = redis_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        limit = self._limits.get((request.method, request.url.path))
        if limit is None:
            return await call_next(request)

        key = f"ratelimit:{_client_subject(request)}:{request.url.path}"
        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, WINDOW_SECONDS)
        except RedisError as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > limit:
            err = RateLimitError(retry_after=WINDOW_SECONDS)
            resp = error_response(err.code, err.message, err.data)
            resp.request_id = getattr(request.state, "request_id", resp.request_id)
            return JSONResponse(
                status_code=err.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(WINDOW_SECONDS)},
            )
        return await call_next(request)
