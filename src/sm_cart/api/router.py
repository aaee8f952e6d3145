"""sm_cart REST endpoints.

GET    /cart               — listed items in the current user's cart
POST   /cart               — add a listing
DELETE /cart/{listing_id}  — remove one listing
DELETE /cart               — empty the cart (idempotent)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_cart.application.schemas import AddToCartRequest
from src.sm_cart.application.service import CartApplicationService
from src.sm_common.database import get_db_session
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import get_current_user
from src.sm_gateway.user.db_models import UserModel

router = APIRouter(prefix="/cart", tags=["cart"])

_service = CartApplicationService()


@router.get("")
async def get_cart(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_cart(db, current_user.id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=201)
async def add_to_cart(
    body: AddToCartRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.add_to_cart(db, current_user.id, body.listing_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.delete("/{listing_id}")
async def remove_from_cart(
    listing_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.remove_from_cart(db, current_user.id, listing_id)
    resp = success_response({"listing_id": str(listing_id), "removed": True})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.delete("")
async def clear_cart(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.clear_cart(db, current_user.id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
