"""CartRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_cart.domain.models import CartEntry, CartItem, CartTarget


class CartRepositoryProtocol(Protocol):
    async def get_target(self, db: AsyncSession, listing_id: int) -> CartTarget | None: ...

    async def add_entry(
        self, db: AsyncSession, user_id: int, listing_id: int
    ) -> CartEntry | None: ...

    async def remove_entry(self, db: AsyncSession, user_id: int, listing_id: int) -> bool: ...

    async def clear(self, db: AsyncSession, user_id: int) -> int: ...

    async def list_items(self, db: AsyncSession, user_id: int) -> list[CartItem]: ...
