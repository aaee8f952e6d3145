# src/sm_admin/api/router.py
"""Admin REST API. Every route requires a caller listed in ADMIN_STEAM_IDS."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.application.schemas import DepositRequest, WithdrawRequest
from src.sm_admin.application.service import AdminService
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import require_admin
from src.sm_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.post("/users/{user_id}/deposit")
async def deposit(
    user_id: int,
    body: DepositRequest,
    request: Request,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.deposit(user_id, body.amount_cents, db)
    logger.info("Admin %s deposited %d to user=%s", admin.id, body.amount_cents, user_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/users/{user_id}/withdraw")
async def withdraw(
    user_id: int,
    body: WithdrawRequest,
    request: Request,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.withdraw(user_id, body.amount_cents, db)
    logger.info("Admin %s withdrew %d from user=%s", admin.id, body.amount_cents, user_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/ledger/audit")
async def audit_ledger(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.audit_ledger(db)
    return success_response(result)
