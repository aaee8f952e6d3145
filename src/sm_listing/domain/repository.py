"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_listing.domain.models import Listing, ListingFilter, NewListing


class ListingRepositoryProtocol(Protocol):
    async def get_listing(self, db: AsyncSession, listing_id: int) -> Listing | None: ...

    async def browse(
        self,
        db: AsyncSession,
        filters: ListingFilter,
        sort: str,
        limit: int,
        offset: int,
    ) -> tuple[list[Listing], int]: ...

    async def list_by_seller(
        self, db: AsyncSession, seller_id: int, status: str
    ) -> list[Listing]: ...

    async def create(
        self, db: AsyncSession, seller_id: int, listing: NewListing
    ) -> Listing: ...

    async def cancel(self, db: AsyncSession, seller_id: int, listing_id: int) -> bool: ...

    async def prune_cart_entries(self, db: AsyncSession, listing_id: int) -> int: ...
