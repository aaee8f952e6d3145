"""sm_listing REST endpoints.

GET    /listings              — browse listed items (public)
GET    /listings/{listing_id} — single listing (public)
POST   /listings              — create a listing for the current user
DELETE /listings/{listing_id} — seller cancels own listed item
GET    /users/me/listings     — current user's listings by status
"""

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.cents import decimal_to_cents
from src.sm_common.database import get_db_session
from src.sm_common.enums import ListingSort, ListingStatus
from src.sm_common.response import ApiResponse, success_response
from src.sm_gateway.auth.dependencies import get_current_user
from src.sm_gateway.user.db_models import UserModel
from src.sm_listing.application.schemas import CreateListingRequest
from src.sm_listing.application.service import ListingApplicationService
from src.sm_listing.domain.models import ListingFilter

router = APIRouter(prefix="/listings", tags=["listings"])
my_router = APIRouter(prefix="/users/me/listings", tags=["listings"])

_service = ListingApplicationService()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get("")
async def browse_listings(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    search: str | None = Query(None, max_length=100),
    category: str | None = Query(None, description="Comma-separated categories"),
    rarity: str | None = Query(None, description="Comma-separated rarities"),
    wear: str | None = Query(None, description="Comma-separated wear grades"),
    stattrak: bool = Query(False),
    price_min: Decimal | None = Query(None, ge=0, decimal_places=2),
    price_max: Decimal | None = Query(None, ge=0, decimal_places=2),
    sort: ListingSort = Query(ListingSort.NEWEST),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    filters = ListingFilter(
        search=search.strip() if search else None,
        categories=_split_csv(category),
        rarities=_split_csv(rarity),
        wears=_split_csv(wear),
        stattrak_only=stattrak,
        price_min=decimal_to_cents(price_min) if price_min is not None else None,
        price_max=decimal_to_cents(price_max) if price_max is not None else None,
    )
    result = await _service.browse_listings(db, filters, sort, limit, offset)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{listing_id}")
async def get_listing(
    listing_id: int,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_listing(db, listing_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=201)
async def create_listing(
    body: CreateListingRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_listing(db, current_user.id, body)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.delete("/{listing_id}")
async def cancel_listing(
    listing_id: int,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.cancel_listing(db, current_user.id, listing_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@my_router.get("")
async def list_own_listings(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: ListingStatus = Query(ListingStatus.LISTED),
) -> ApiResponse:
    result = await _service.list_own_listings(db, current_user.id, status)
    resp = success_response([item.model_dump() for item in result])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
