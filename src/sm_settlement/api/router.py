"""sm_settlement REST endpoint.

POST /checkout — settle the current user's whole cart in one transaction.
Rate limited per user by RateLimitMiddleware.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import get_current_user
from src.sm_gateway.user.db_models import UserModel
from src.sm_settlement.application.schemas import CheckoutResponse
from src.sm_settlement.domain.service import SettlementEngine

router = APIRouter(prefix="/checkout", tags=["checkout"])

_engine = SettlementEngine()


@router.post("")
async def checkout(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _engine.settle_cart(current_user.id, db)
    resp = success_response(CheckoutResponse.from_result(result).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
