"""SettlementRepository Protocol: store operations the settlement engine needs.

Every method runs inside the caller's transaction; none of them commit.
"""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_settlement.domain.models import CartLine


class SettlementRepositoryProtocol(Protocol):
    async def set_lock_timeout(self, db: AsyncSession, timeout_ms: int) -> None: ...

    async def read_cart_lines(self, db: AsyncSession, buyer_id: int) -> list[CartLine]: ...

    async def lock_balances(self, db: AsyncSession, user_ids: list[int]) -> dict[int, int]: ...

    async def lock_listing_statuses(
        self, db: AsyncSession, listing_ids: list[int]
    ) -> dict[int, str]: ...

    async def mark_sold(self, db: AsyncSession, listing_id: int) -> bool: ...

    async def debit_buyer(self, db: AsyncSession, buyer_id: int, amount: int) -> int: ...

    async def credit_seller(self, db: AsyncSession, seller_id: int, amount: int) -> int: ...

    async def clear_cart(self, db: AsyncSession, buyer_id: int) -> int: ...
