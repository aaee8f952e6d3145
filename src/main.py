"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.sm_account.api.router import router as account_router
from src.sm_admin.api.router import router as admin_router
from src.sm_cart.api.router import router as cart_router
from src.sm_common.database import check_database, engine
from src.sm_common.errors import AppError
from src.sm_common.redis_client import close_redis, get_redis
from src.sm_common.response import error_response
from src.sm_gateway.api.router import router as auth_router
from src.sm_gateway.middleware.rate_limit import RateLimitMiddleware
from src.sm_gateway.middleware.request_log import RequestLogMiddleware
from src.sm_listing.api.router import my_router as my_listings_router
from src.sm_listing.api.router import router as listing_router
from src.sm_settlement.api.router import router as checkout_router

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    await check_database()
    await get_redis()
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Added last runs first: RequestLog wraps RateLimit
app.add_middleware(
    RateLimitMiddleware,
    limits={("POST", f"{API_PREFIX}/checkout"): settings.CHECKOUT_RATE_LIMIT_PER_MIN},
)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(account_router, prefix=API_PREFIX)
app.include_router(my_listings_router, prefix=API_PREFIX)
app.include_router(listing_router, prefix=API_PREFIX)
app.include_router(cart_router, prefix=API_PREFIX)
app.include_router(checkout_router, prefix=API_PREFIX)
app.include_router(admin_router, prefix=API_PREFIX)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
