# src/sm_admin/application/service.py
"""Admin application service: balance adjustments and ledger audit."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.application.schemas import BalanceChangeResponse
from src.sm_account.application.service import AccountApplicationService
from src.sm_settlement.domain.invariants import verify_ledger_invariants

_LEDGER_STATS_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM users) AS users,
        (SELECT COALESCE(SUM(balance), 0) FROM users) AS balance_sum,
        (SELECT COUNT(*) FROM listings WHERE status = 'listed') AS listed,
        (SELECT COUNT(*) FROM listings WHERE status = 'sold') AS sold,
        (SELECT COUNT(*) FROM listings WHERE status = 'cancelled') AS cancelled,
        (SELECT COUNT(*) FROM transactions) AS transactions
""")


class AdminService:
    def __init__(self, accounts: AccountApplicationService | None = None) -> None:
        self._accounts = accounts or AccountApplicationService()

    async def deposit(
        self, user_id: int, amount_cents: int, db: AsyncSession
    ) -> BalanceChangeResponse:
        return await self._accounts.deposit(db, user_id, amount_cents)

    async def withdraw(
        self, user_id: int, amount_cents: int, db: AsyncSession
    ) -> BalanceChangeResponse:
        return await self._accounts.withdraw(db, user_id, amount_cents)

    async def audit_ledger(self, db: AsyncSession) -> dict[str, Any]:
        """Run the whole-ledger invariant checks plus headline counts."""
        violations = await verify_ledger_invariants(db)
        stats = (await db.execute(_LEDGER_STATS_SQL)).fetchone()
        return {
            "ok": len(violations) == 0,
            "violations": violations,
            "stats": {
                "users": int(stats.users),
                "balance_sum_cents": int(stats.balance_sum),
                "listings_listed": int(stats.listed),
                "listings_sold": int(stats.sold),
                "listings_cancelled": int(stats.cancelled),
                "transactions": int(stats.transactions),
            }
            if stats
            else {},
        }
