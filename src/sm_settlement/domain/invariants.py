"""Ledger invariant checks.

verify_settlement_pairs runs inside every checkout before commit;
verify_ledger_invariants is the whole-ledger audit used by sm_admin.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import InvariantViolationError
from src.sm_settlement.domain.models import CartLine

logger = logging.getLogger(__name__)

_PAIR_SQL = text("""
    SELECT listing_id,
           COUNT(*) FILTER (WHERE type = 'purchase') AS purchases,
           COUNT(*) FILTER (WHERE type = 'sale') AS sales,
           COALESCE(SUM(amount) FILTER (WHERE type = 'purchase'), 0) AS debited,
           COALESCE(SUM(amount) FILTER (WHERE type = 'sale'), 0) AS credited
    FROM transactions
    WHERE listing_id = ANY(CAST(:listing_ids AS BIGINT[]))
      AND status = 'completed'
    GROUP BY listing_id
""")

_BALANCE_SUM_SQL = text("SELECT COALESCE(SUM(balance), 0) FROM users")

_NET_DEPOSIT_SQL = text("""
    SELECT COALESCE(SUM(CASE WHEN type = 'deposit' THEN amount ELSE -amount END), 0)
    FROM transactions
    WHERE type IN ('deposit', 'withdrawal') AND status = 'completed'
""")

_UNPAIRED_SQL = text("""
    SELECT listing_id,
           COUNT(*) FILTER (WHERE type = 'purchase') AS purchases,
           COUNT(*) FILTER (WHERE type = 'sale') AS sales,
           COALESCE(SUM(amount) FILTER (WHERE type = 'purchase'), 0) AS debited,
           COALESCE(SUM(amount) FILTER (WHERE type = 'sale'), 0) AS credited
    FROM transactions
    WHERE type IN ('purchase', 'sale') AND status = 'completed' AND listing_id IS NOT NULL
    GROUP BY listing_id
    HAVING COUNT(*) FILTER (WHERE type = 'purchase') <> 1
        OR COUNT(*) FILTER (WHERE type = 'sale') <> 1
        OR COALESCE(SUM(amount) FILTER (WHERE type = 'purchase'), 0)
           <> COALESCE(SUM(amount) FILTER (WHERE type = 'sale'), 0)
""")

_SOLD_WITHOUT_PURCHASE_SQL = text("""
    SELECT l.id
    FROM listings l
    WHERE l.status = 'sold'
      AND NOT EXISTS (
          SELECT 1 FROM transactions t
          WHERE t.listing_id = l.id AND t.type = 'purchase' AND t.status = 'completed'
      )
    ORDER BY l.id
""")


async def verify_settlement_pairs(lines: list[CartLine], db: AsyncSession) -> None:
    """Each settled listing must carry exactly one purchase and one sale of its price.

    Raises InvariantViolationError so the caller rolls the checkout back.
    """
    expected = {line.listing_id: line.price for line in lines}
    rows = (
        await db.execute(_PAIR_SQL, {"listing_ids": list(expected)})
    ).fetchall()
    seen = {row.listing_id: row for row in rows}

    for listing_id, price in expected.items():
        row = seen.get(listing_id)
        if row is None:
            raise InvariantViolationError(f"listing {listing_id} has no ledger rows")
        if row.purchases != 1 or row.sales != 1:
            raise InvariantViolationError(
                f"listing {listing_id}: purchases={row.purchases} sales={row.sales}"
            )
        if row.debited != price or row.credited != price:
            raise InvariantViolationError(
                f"listing {listing_id}: debited={row.debited} credited={row.credited} "
                f"price={price}"
            )
    logger.debug("Settlement pairs OK for %d listings", len(expected))


async def verify_ledger_invariants(db: AsyncSession) -> list[str]:
    """Whole-ledger audit. Returns a list of violation strings (empty when clean).

    - sum of user balances == net deposits (settlement only moves money between users)
    - every purchase/sale row is paired, with equal amounts, per listing
    - every sold listing has a completed purchase
    """
    violations: list[str] = []

    balance_sum = (await db.execute(_BALANCE_SUM_SQL)).scalar_one()
    net_deposits = (await db.execute(_NET_DEPOSIT_SQL)).scalar_one()
    if balance_sum != net_deposits:
        violations.append(
            f"balance sum {balance_sum} != net deposits {net_deposits}"
        )

    for row in (await db.execute(_UNPAIRED_SQL)).fetchall():
        violations.append(
            f"listing {row.listing_id}: purchases={row.purchases} sales={row.sales} "
            f"debited={row.debited} credited={row.credited}"
        )

    for row in (await db.execute(_SOLD_WITHOUT_PURCHASE_SQL)).fetchall():
        violations.append(f"listing {row.id} is sold without a purchase row")

    for msg in violations:
        logger.error("Ledger invariant violated: %s", msg)
    return violations
