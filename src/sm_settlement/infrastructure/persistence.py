"""SettlementRepository implements SettlementRepositoryProtocol.

Locking discipline:
  - user rows are locked with FOR UPDATE in ascending id order
  - listing rows are then locked FOR UPDATE in ascending id order and their
    status re-read, so availability is judged on committed state
  - listing rows move listed -> sold through a conditional UPDATE, one at a
    time in ascending listing id order
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import InternalError
from src.sm_settlement.domain.models import CartLine

_READ_CART_SQL = text("""
    SELECT l.id AS listing_id, l.name, l.price, l.seller_id, l.status
    FROM cart_items ci
    JOIN listings l ON l.id = ci.listing_id
    WHERE ci.user_id = :buyer_id
    ORDER BY l.id ASC
""")

_LOCK_USERS_SQL = text("""
    SELECT id, balance
    FROM users
    WHERE id = ANY(CAST(:user_ids AS BIGINT[]))
    ORDER BY id ASC
    FOR UPDATE
""")

_LOCK_LISTINGS_SQL = text("""
    SELECT id, status
    FROM listings
    WHERE id = ANY(CAST(:listing_ids AS BIGINT[]))
    ORDER BY id ASC
    FOR UPDATE
""")

_MARK_SOLD_SQL = text("""
    UPDATE listings
    SET status = 'sold'
    WHERE id = :listing_id AND status = 'listed'
    RETURNING id
""")

_DEBIT_BUYER_SQL = text("""
    UPDATE users
    SET balance = balance - :amount,
        total_purchases = total_purchases + :amount
    WHERE id = :user_id
    RETURNING balance
""")

_CREDIT_SELLER_SQL = text("""
    UPDATE users
    SET balance = balance + :amount,
        total_sales = total_sales + :amount
    WHERE id = :user_id
    RETURNING balance
""")

_CLEAR_CART_SQL = text("""
    DELETE FROM cart_items WHERE user_id = :buyer_id
""")


class SettlementRepository:
    async def set_lock_timeout(self, db: AsyncSession, timeout_ms: int) -> None:
        # SET LOCAL does not accept bind parameters
        await db.execute(text(f"SET LOCAL lock_timeout = {int(timeout_ms)}"))

    async def read_cart_lines(self, db: AsyncSession, buyer_id: int) -> list[CartLine]:
        rows = (await db.execute(_READ_CART_SQL, {"buyer_id": buyer_id})).fetchall()
        return [
            CartLine(
                listing_id=row.listing_id,
                name=row.name,
                price=row.price,
                seller_id=row.seller_id,
                status=row.status,
            )
            for row in rows
        ]

    async def lock_balances(self, db: AsyncSession, user_ids: list[int]) -> dict[int, int]:
        """Lock the given user rows and return {user_id: balance}."""
        ordered = sorted(set(user_ids))
        rows = (await db.execute(_LOCK_USERS_SQL, {"user_ids": ordered})).fetchall()
        return {row.id: row.balance for row in rows}

    async def lock_listing_statuses(
        self, db: AsyncSession, listing_ids: list[int]
    ) -> dict[int, str]:
        """Lock the given listing rows and return {listing_id: status}; deleted rows are absent."""
        ordered = sorted(set(listing_ids))
        rows = (await db.execute(_LOCK_LISTINGS_SQL, {"listing_ids": ordered})).fetchall()
        return {row.id: row.status for row in rows}

    async def mark_sold(self, db: AsyncSession, listing_id: int) -> bool:
        result = await db.execute(_MARK_SOLD_SQL, {"listing_id": listing_id})
        return result.fetchone() is not None

    async def debit_buyer(self, db: AsyncSession, buyer_id: int, amount: int) -> int:
        return await self._apply(db, _DEBIT_BUYER_SQL, buyer_id, amount)

    async def credit_seller(self, db: AsyncSession, seller_id: int, amount: int) -> int:
        return await self._apply(db, _CREDIT_SELLER_SQL, seller_id, amount)

    async def clear_cart(self, db: AsyncSession, buyer_id: int) -> int:
        result = await db.execute(_CLEAR_CART_SQL, {"buyer_id": buyer_id})
        return result.rowcount or 0

    async def _apply(self, db: AsyncSession, stmt: object, user_id: int, amount: int) -> int:
        row = (await db.execute(stmt, {"user_id": user_id, "amount": amount})).fetchone()  # type: ignore[arg-type]
        if row is None:
            raise InternalError(f"Balance update matched no row for locked user {user_id}")
        return int(row.balance)
