"""ListingApplicationService: listing lifecycle: create, read, browse, cancel.

State machine: listed -> sold (settlement only) | cancelled (seller only).
Both targets are terminal; every transition is a conditional UPDATE on the
row's current status.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.cents import decimal_to_cents, validate_price
from src.sm_common.enums import ListingSort, ListingStatus
from src.sm_common.errors import (
    InvalidListingError,
    ListingNotCancellableError,
    ListingNotFoundError,
)
from src.sm_listing.application.schemas import (
    CancelListingResponse,
    CreateListingRequest,
    ListingListResponse,
    ListingResponse,
)
from src.sm_listing.domain.models import ListingFilter, NewListing
from src.sm_listing.domain.repository import ListingRepositoryProtocol
from src.sm_listing.infrastructure.persistence import ListingRepository

logger = logging.getLogger(__name__)

_REQUIRED_TEXT_FIELDS = ("name", "weapon", "category", "rarity", "wear")


def _to_new_listing(req: CreateListingRequest) -> NewListing:
    missing = [f for f in _REQUIRED_TEXT_FIELDS if not getattr(req, f).strip()]
    if missing:
        raise InvalidListingError(f"missing required fields: {', '.join(missing)}")
    try:
        price = decimal_to_cents(req.price)
        validate_price(price)
    except ValueError as exc:
        raise InvalidListingError(str(exc)) from exc
    return NewListing(
        name=req.name.strip(),
        weapon=req.weapon.strip(),
        category=req.category.strip(),
        rarity=req.rarity.strip(),
        wear=req.wear.strip(),
        price=price,
        float_value=req.float_value,
        image_url=req.image_url,
        stattrak=req.stattrak,
        collection=req.collection,
        inspect_link=req.inspect_link,
        steam_asset_id=req.steam_asset_id,
    )


class ListingApplicationService:
    def __init__(self, repo: ListingRepositoryProtocol | None = None) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()

    async def create_listing(
        self, db: AsyncSession, seller_id: int, req: CreateListingRequest
    ) -> ListingResponse:
        new_listing = _to_new_listing(req)
        try:
            listing = await self._repo.create(db, seller_id, new_listing)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Listing %s created by user=%s price=%d", listing.id, seller_id, listing.price)
        return ListingResponse.from_domain(listing)

    async def get_listing(self, db: AsyncSession, listing_id: int) -> ListingResponse:
        listing = await self._repo.get_listing(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return ListingResponse.from_domain(listing)

    async def browse_listings(
        self,
        db: AsyncSession,
        filters: ListingFilter,
        sort: ListingSort,
        limit: int,
        offset: int,
    ) -> ListingListResponse:
        listings, total = await self._repo.browse(db, filters, sort.value, limit, offset)
        return ListingListResponse(
            items=[ListingResponse.from_domain(lst) for lst in listings],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def list_own_listings(
        self, db: AsyncSession, seller_id: int, status: ListingStatus
    ) -> list[ListingResponse]:
        listings = await self._repo.list_by_seller(db, seller_id, status.value)
        return [ListingResponse.from_domain(lst) for lst in listings]

    async def cancel_listing(
        self, db: AsyncSession, seller_id: int, listing_id: int
    ) -> CancelListingResponse:
        """Cancel a seller's own listed item and drop it from every cart.

        Missing, foreign, sold and already-cancelled listings all fail the
        same way.
        """
        try:
            cancelled = await self._repo.cancel(db, seller_id, listing_id)
            if not cancelled:
                raise ListingNotCancellableError(listing_id)
            removed = await self._repo.prune_cart_entries(db, listing_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Listing %s cancelled by user=%s, %d cart entries pruned",
            listing_id, seller_id, removed,
        )
        return CancelListingResponse(
            listing_id=str(listing_id),
            status=ListingStatus.CANCELLED.value,
            cart_entries_removed=removed,
        )
