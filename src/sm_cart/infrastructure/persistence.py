"""CartRepository implements CartRepositoryProtocol with raw text() SQL.

Uniqueness of (user_id, listing_id) is enforced by the table constraint;
add_entry relies on ON CONFLICT so concurrent duplicate adds resolve to
exactly one row.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_cart.domain.models import CartEntry, CartItem, CartTarget
from src.sm_listing.infrastructure.persistence import LISTING_COLUMNS, row_to_listing

_GET_TARGET_SQL = text("""
    SELECT id, seller_id, status FROM listings WHERE id = :listing_id
""")

_ADD_ENTRY_SQL = text("""
    INSERT INTO cart_items (user_id, listing_id)
    VALUES (:user_id, :listing_id)
    ON CONFLICT (user_id, listing_id) DO NOTHING
    RETURNING id, user_id, listing_id, added_at
""")

_REMOVE_ENTRY_SQL = text("""
    DELETE FROM cart_items
    WHERE user_id = :user_id AND listing_id = :listing_id
    RETURNING id
""")

_CLEAR_SQL = text("""
    DELETE FROM cart_items WHERE user_id = :user_id
""")

# Entries whose listing left the listed state are hidden, not deleted
_LIST_ITEMS_SQL = text(f"""
    SELECT ci.id AS cart_item_id, ci.added_at, {LISTING_COLUMNS}
    FROM cart_items ci
    JOIN listings l ON l.id = ci.listing_id
    JOIN users u ON u.id = l.seller_id
    WHERE ci.user_id = :user_id AND l.status = 'listed'
    ORDER BY ci.added_at DESC, ci.id DESC
""")


class CartRepository:
    async def get_target(self, db: AsyncSession, listing_id: int) -> CartTarget | None:
        row = (await db.execute(_GET_TARGET_SQL, {"listing_id": listing_id})).fetchone()
        if row is None:
            return None
        return CartTarget(listing_id=row.id, seller_id=row.seller_id, status=row.status)

    async def add_entry(
        self, db: AsyncSession, user_id: int, listing_id: int
    ) -> CartEntry | None:
        """Insert the entry; None when it already exists."""
        result = await db.execute(
            _ADD_ENTRY_SQL, {"user_id": user_id, "listing_id": listing_id}
        )
        row = result.fetchone()
        if row is None:
            return None
        return CartEntry(
            id=row.id, user_id=row.user_id, listing_id=row.listing_id, added_at=row.added_at
        )

    async def remove_entry(self, db: AsyncSession, user_id: int, listing_id: int) -> bool:
        result = await db.execute(
            _REMOVE_ENTRY_SQL, {"user_id": user_id, "listing_id": listing_id}
        )
        return result.fetchone() is not None

    async def clear(self, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(_CLEAR_SQL, {"user_id": user_id})
        return result.rowcount or 0

    async def list_items(self, db: AsyncSession, user_id: int) -> list[CartItem]:
        rows = (await db.execute(_LIST_ITEMS_SQL, {"user_id": user_id})).fetchall()
        return [
            CartItem(cart_item_id=row.cart_item_id, added_at=row.added_at, listing=row_to_listing(row))
            for row in rows
        ]
