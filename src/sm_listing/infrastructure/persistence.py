"""ListingRepository implements ListingRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
ORDER BY cannot be bound, so one statement per whitelisted sort is prepared up front.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.enums import ListingSort
from src.sm_common.errors import InternalError
from src.sm_listing.domain.models import Listing, ListingFilter, NewListing

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

LISTING_COLUMNS = """
    l.id, l.seller_id, l.name, l.weapon, l.category, l.rarity, l.wear,
    l.float_value, l.price, l.image_url, l.stattrak, l.collection,
    l.inspect_link, l.steam_asset_id, l.status, l.listed_at,
    u.username AS seller_name, u.avatar AS seller_avatar
"""

_GET_LISTING_SQL = text(f"""
    SELECT {LISTING_COLUMNS}
    FROM listings l
    JOIN users u ON u.id = l.seller_id
    WHERE l.id = :listing_id
""")

_BROWSE_WHERE = """
    WHERE l.status = 'listed'
      AND (CAST(:search AS TEXT) IS NULL
           OR l.name ILIKE CAST(:search AS TEXT) ESCAPE '\\'
           OR l.weapon ILIKE CAST(:search AS TEXT) ESCAPE '\\')
      AND (CAST(:categories AS TEXT[]) IS NULL OR l.category = ANY(CAST(:categories AS TEXT[])))
      AND (CAST(:rarities AS TEXT[]) IS NULL OR l.rarity = ANY(CAST(:rarities AS TEXT[])))
      AND (CAST(:wears AS TEXT[]) IS NULL OR l.wear = ANY(CAST(:wears AS TEXT[])))
      AND (NOT CAST(:stattrak_only AS BOOLEAN) OR l.stattrak)
      AND (CAST(:price_min AS BIGINT) IS NULL OR l.price >= CAST(:price_min AS BIGINT))
      AND (CAST(:price_max AS BIGINT) IS NULL OR l.price <= CAST(:price_max AS BIGINT))
"""

# id breaks ties so offset pages never repeat or skip rows
_SORT_CLAUSES: dict[ListingSort, str] = {
    ListingSort.NEWEST: "l.listed_at DESC, l.id DESC",
    ListingSort.PRICE_ASC: "l.price ASC, l.id ASC",
    ListingSort.PRICE_DESC: "l.price DESC, l.id DESC",
    ListingSort.FLOAT_ASC: "l.float_value ASC, l.id ASC",
    ListingSort.FLOAT_DESC: "l.float_value DESC, l.id DESC",
}

_BROWSE_SQL = {
    sort: text(f"""
        SELECT {LISTING_COLUMNS}
        FROM listings l
        JOIN users u ON u.id = l.seller_id
        {_BROWSE_WHERE}
        ORDER BY {clause}
        LIMIT :limit OFFSET :offset
    """)
    for sort, clause in _SORT_CLAUSES.items()
}

_COUNT_SQL = text(f"""
    SELECT COUNT(*)
    FROM listings l
    {_BROWSE_WHERE}
""")

_LIST_BY_SELLER_SQL = text(f"""
    SELECT {LISTING_COLUMNS}
    FROM listings l
    JOIN users u ON u.id = l.seller_id
    WHERE l.seller_id = :seller_id AND l.status = :status
    ORDER BY l.listed_at DESC, l.id DESC
""")

_INSERT_LISTING_SQL = text("""
    INSERT INTO listings
        (seller_id, name, weapon, category, rarity, wear, float_value, price,
         image_url, stattrak, collection, inspect_link, steam_asset_id)
    VALUES
        (:seller_id, :name, :weapon, :category, :rarity, :wear, :float_value, :price,
         :image_url, :stattrak, :collection, :inspect_link, :steam_asset_id)
    RETURNING id
""")

# Ownership and current status are part of the same statement as the transition
_CANCEL_LISTING_SQL = text("""
    UPDATE listings
    SET status = 'cancelled'
    WHERE id = :listing_id AND seller_id = :seller_id AND status = 'listed'
    RETURNING id
""")

_PRUNE_CART_SQL = text("""
    DELETE FROM cart_items WHERE listing_id = :listing_id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def row_to_listing(row: object) -> Listing:
    return Listing(
        id=row.id,  # type: ignore[attr-defined]
        seller_id=row.seller_id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        weapon=row.weapon,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        rarity=row.rarity,  # type: ignore[attr-defined]
        wear=row.wear,  # type: ignore[attr-defined]
        float_value=row.float_value,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        image_url=row.image_url,  # type: ignore[attr-defined]
        stattrak=row.stattrak,  # type: ignore[attr-defined]
        collection=row.collection,  # type: ignore[attr-defined]
        inspect_link=row.inspect_link,  # type: ignore[attr-defined]
        steam_asset_id=row.steam_asset_id,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        listed_at=row.listed_at,  # type: ignore[attr-defined]
        seller_name=row.seller_name or "",  # type: ignore[attr-defined]
        seller_avatar=row.seller_avatar or "",  # type: ignore[attr-defined]
    )


def _like_pattern(search: str | None) -> str | None:
    if not search:
        return None
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _filter_params(filters: ListingFilter) -> dict[str, object]:
    return {
        "search": _like_pattern(filters.search),
        "categories": filters.categories or None,
        "rarities": filters.rarities or None,
        "wears": filters.wears or None,
        "stattrak_only": filters.stattrak_only,
        "price_min": filters.price_min,
        "price_max": filters.price_max,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingRepository:
    """Concrete repository. Mutations expect the caller to commit."""

    async def get_listing(self, db: AsyncSession, listing_id: int) -> Listing | None:
        result = await db.execute(_GET_LISTING_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return row_to_listing(row) if row else None

    async def browse(
        self,
        db: AsyncSession,
        filters: ListingFilter,
        sort: str,
        limit: int,
        offset: int,
    ) -> tuple[list[Listing], int]:
        params = _filter_params(filters)
        stmt = _BROWSE_SQL[ListingSort(sort)]
        rows = (
            await db.execute(stmt, {**params, "limit": limit, "offset": offset})
        ).fetchall()
        total = (await db.execute(_COUNT_SQL, params)).scalar_one()
        return [row_to_listing(row) for row in rows], int(total)

    async def list_by_seller(
        self, db: AsyncSession, seller_id: int, status: str
    ) -> list[Listing]:
        rows = (
            await db.execute(_LIST_BY_SELLER_SQL, {"seller_id": seller_id, "status": status})
        ).fetchall()
        return [row_to_listing(row) for row in rows]

    async def create(
        self, db: AsyncSession, seller_id: int, listing: NewListing
    ) -> Listing:
        result = await db.execute(
            _INSERT_LISTING_SQL,
            {
                "seller_id": seller_id,
                "name": listing.name,
                "weapon": listing.weapon,
                "category": listing.category,
                "rarity": listing.rarity,
                "wear": listing.wear,
                "float_value": listing.float_value,
                "price": listing.price,
                "image_url": listing.image_url,
                "stattrak": listing.stattrak,
                "collection": listing.collection,
                "inspect_link": listing.inspect_link,
                "steam_asset_id": listing.steam_asset_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Listing insert returned no rows")
        created = await self.get_listing(db, row.id)
        if created is None:
            raise InternalError(f"Listing {row.id} vanished right after insert")
        return created

    async def cancel(self, db: AsyncSession, seller_id: int, listing_id: int) -> bool:
        result = await db.execute(
            _CANCEL_LISTING_SQL, {"listing_id": listing_id, "seller_id": seller_id}
        )
        return result.fetchone() is not None

    async def prune_cart_entries(self, db: AsyncSession, listing_id: int) -> int:
        result = await db.execute(_PRUNE_CART_SQL, {"listing_id": listing_id})
        return result.rowcount or 0
