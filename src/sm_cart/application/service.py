"""CartApplicationService: per-user cart of listing references.

Cart rows never hold prices; the total shown here is recomputed from the
current listing rows on every read.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_cart.application.schemas import (
    AddToCartResponse,
    CartItemResponse,
    CartResponse,
    ClearCartResponse,
)
from src.sm_cart.domain.repository import CartRepositoryProtocol
from src.sm_cart.infrastructure.persistence import CartRepository
from src.sm_common.cents import sum_cents
from src.sm_common.enums import ListingStatus
from src.sm_common.errors import (
    CartEntryNotFoundError,
    DuplicateCartEntryError,
    ListingNotFoundError,
    SelfPurchaseError,
)

logger = logging.getLogger(__name__)


class CartApplicationService:
    def __init__(self, repo: CartRepositoryProtocol | None = None) -> None:
        self._repo: CartRepositoryProtocol = repo or CartRepository()

    async def add_to_cart(
        self, db: AsyncSession, user_id: int, listing_id: int
    ) -> AddToCartResponse:
        try:
            target = await self._repo.get_target(db, listing_id)
            if target is None or target.status != ListingStatus.LISTED.value:
                raise ListingNotFoundError(listing_id)
            if target.seller_id == user_id:
                raise SelfPurchaseError()
            entry = await self._repo.add_entry(db, user_id, listing_id)
            if entry is None:
                raise DuplicateCartEntryError(listing_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.debug("Cart add user=%s listing=%s", user_id, listing_id)
        return AddToCartResponse(
            cart_item_id=str(entry.id),
            listing_id=str(entry.listing_id),
            added_at=entry.added_at.isoformat(),
        )

    async def remove_from_cart(self, db: AsyncSession, user_id: int, listing_id: int) -> None:
        try:
            removed = await self._repo.remove_entry(db, user_id, listing_id)
            if not removed:
                raise CartEntryNotFoundError(listing_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def clear_cart(self, db: AsyncSession, user_id: int) -> ClearCartResponse:
        try:
            removed = await self._repo.clear(db, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ClearCartResponse(removed=removed)

    async def list_cart(self, db: AsyncSession, user_id: int) -> CartResponse:
        items = await self._repo.list_items(db, user_id)
        total = sum_cents([item.listing.price for item in items])
        return CartResponse.build([CartItemResponse.from_domain(i) for i in items], total)
