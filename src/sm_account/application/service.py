"""AccountApplicationService: thin composition layer.

Combines repository calls with schema transformations.
Deposit and withdraw commit on success and roll back on any error.
Reads (profile, transaction history) run without an explicit transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.application.schemas import (
    BalanceChangeResponse,
    ProfileResponse,
    TransactionItem,
    TransactionListResponse,
    cursor_decode,
    cursor_encode,
)
from src.sm_account.domain.repository import AccountRepositoryProtocol
from src.sm_account.infrastructure.persistence import AccountRepository
from src.sm_common.errors import UserNotFoundError

logger = logging.getLogger(__name__)


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_profile(self, db: AsyncSession, user_id: int) -> ProfileResponse:
        user = await self._repo.get_user(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        stats = await self._repo.get_profile_stats(db, user_id)
        return ProfileResponse.from_domain(user, stats)

    async def deposit(
        self, db: AsyncSession, user_id: int, amount_cents: int
    ) -> BalanceChangeResponse:
        try:
            user, entry = await self._repo.deposit(db, user_id, amount_cents)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deposit user=%s amount=%d balance=%d", user_id, amount_cents, user.balance)
        return BalanceChangeResponse.from_result(user, entry)

    async def withdraw(
        self, db: AsyncSession, user_id: int, amount_cents: int
    ) -> BalanceChangeResponse:
        try:
            user, entry = await self._repo.withdraw(db, user_id, amount_cents)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Withdrawal user=%s amount=%d balance=%d", user_id, amount_cents, user.balance)
        return BalanceChangeResponse.from_result(user, entry)

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: int,
        cursor: str | None,
        limit: int,
        tx_type: str | None,
    ) -> TransactionListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_transactions(
            db, user_id, cursor_id, limit + 1, tx_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(
            items=[TransactionItem.from_domain(t) for t in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
