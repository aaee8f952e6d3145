"""Auth API router: identity bridge, refresh, me.

All endpoints return ApiResponse. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sm_common.cents import cents_to_display
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import get_current_user, require_identity_bridge
from src.sm_gateway.user.db_models import UserModel
from src.sm_gateway.user.schemas import (
    IdentityAssertion,
    IdentityResponse,
    MeResponse,
    RefreshRequest,
    RefreshResponse,
    UserInfo,
)
from src.sm_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "/identity",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Exchange a verified identity-provider assertion for tokens",
    dependencies=[Depends(require_identity_bridge)],
)
async def resolve_identity(
    request: Request,
    body: IdentityAssertion,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    async with db.begin():
        resolved = await _service.resolve_identity(body, db)

    data = IdentityResponse(
        access_token=resolved.access_token,
        refresh_token=resolved.refresh_token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        created=resolved.created,
        user=UserInfo(
            user_id=str(resolved.user_id),
            steam_id=resolved.steam_id,
            username=resolved.username,
            avatar=resolved.avatar,
        ),
    )
    resp = success_response(data.model_dump())
    resp.request_id = _get_request_id(request)
    resp.message = "Identity resolved"
    return resp


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token)

    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    resp = success_response(data.model_dump())
    resp.request_id = _get_request_id(request)
    resp.message = "Token refreshed"
    return resp


@router.get("/me", response_model=ApiResponse, summary="Current user")
async def me(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    data = MeResponse(
        user_id=str(current_user.id),
        steam_id=current_user.steam_id,
        username=current_user.username,
        avatar=current_user.avatar,
        balance_cents=current_user.balance,
        balance_display=cents_to_display(current_user.balance),
        total_sales_cents=current_user.total_sales,
        total_purchases_cents=current_user.total_purchases,
        joined_at=current_user.created_at.isoformat(),
    )
    resp = success_response(data.model_dump())
    resp.request_id = _get_request_id(request)
    return resp
