# tests/unit/test_listing_persistence.py
"""Unit tests for ListingRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sm_listing.domain.models import ListingFilter, NewListing
from src.sm_listing.infrastructure.persistence import ListingRepository


def _listing_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", 1)
    row.seller_id = kwargs.get("seller_id", 10)
    row.name = kwargs.get("name", "AWP | Asiimov")
    row.weapon = "AWP"
    row.category = "Sniper Rifle"
    row.rarity = "Covert"
    row.wear = "Field-Tested"
    row.float_value = Decimal("0.3000000000")
    row.price = kwargs.get("price", 5000)
    row.image_url = ""
    row.stattrak = False
    row.collection = None
    row.inspect_link = None
    row.steam_asset_id = None
    row.status = kwargs.get("status", "listed")
    row.listed_at = datetime.now(UTC)
    row.seller_name = kwargs.get("seller_name", "bob")
    row.seller_avatar = None
    return row


@pytest.fixture
def db():
    return MagicMock()


class TestGetListing:
    async def test_maps_row(self, db):
        result = MagicMock()
        result.fetchone.return_value = _listing_row(id=9, price=4200)
        db.execute = AsyncMock(return_value=result)

        listing = await ListingRepository().get_listing(db, 9)

        assert listing is not None
        assert listing.id == 9
        assert listing.price == 4200
        assert listing.seller_avatar == ""

    async def test_missing_returns_none(self, db):
        result = MagicMock()
        result.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result)

        assert await ListingRepository().get_listing(db, 9) is None


class TestBrowse:
    async def test_filter_params_and_total(self, db):
        rows = MagicMock()
        rows.fetchall.return_value = [_listing_row(id=1), _listing_row(id=2)]
        count = MagicMock()
        count.scalar_one.return_value = 42
        db.execute = AsyncMock(side_effect=[rows, count])
        filters = ListingFilter(
            search="50%_off",
            categories=["Rifle", "Knife"],
            stattrak_only=True,
            price_min=1000,
        )

        listings, total = await ListingRepository().browse(db, filters, "price-desc", 20, 40)

        assert total == 42
        assert [lst.id for lst in listings] == [1, 2]
        params = db.execute.call_args_list[0].args[1]
        assert params["search"] == "%50\\%\\_off%"
        assert params["categories"] == ["Rifle", "Knife"]
        assert params["rarities"] is None
        assert params["stattrak_only"] is True
        assert params["price_min"] == 1000
        assert params["price_max"] is None
        assert params["limit"] == 20
        assert params["offset"] == 40
        count_params = db.execute.call_args_list[1].args[1]
        assert "limit" not in count_params

    async def test_sort_selects_order_clause(self, db):
        rows = MagicMock()
        rows.fetchall.return_value = []
        count = MagicMock()
        count.scalar_one.return_value = 0
        db.execute = AsyncMock(side_effect=[rows, count])

        await ListingRepository().browse(db, ListingFilter(), "float-asc", 10, 0)

        sql = str(db.execute.call_args_list[0].args[0])
        assert "ORDER BY l.float_value ASC, l.id ASC" in sql

    async def test_unknown_sort_rejected(self, db):
        with pytest.raises(ValueError):
            await ListingRepository().browse(db, ListingFilter(), "cheapest", 10, 0)


class TestCreate:
    async def test_inserts_then_reads_back(self, db):
        inserted = MagicMock()
        inserted.fetchone.return_value = MagicMock(id=77)
        read_back = MagicMock()
        read_back.fetchone.return_value = _listing_row(id=77, price=1234)
        db.execute = AsyncMock(side_effect=[inserted, read_back])
        new = NewListing(
            name="Glock-18 | Fade",
            weapon="Glock-18",
            category="Pistol",
            rarity="Restricted",
            wear="Factory New",
            price=1234,
        )

        listing = await ListingRepository().create(db, 10, new)

        params = db.execute.call_args_list[0].args[1]
        assert params["seller_id"] == 10
        assert params["price"] == 1234
        assert listing.id == 77


class TestCancel:
    async def test_conditional_update_hit(self, db):
        result = MagicMock()
        result.fetchone.return_value = MagicMock(id=5)
        db.execute = AsyncMock(return_value=result)

        assert await ListingRepository().cancel(db, 10, 5) is True
        sql = str(db.execute.call_args.args[0])
        assert "status = 'listed'" in sql
        assert "seller_id = :seller_id" in sql

    async def test_conditional_update_miss(self, db):
        result = MagicMock()
        result.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result)

        assert await ListingRepository().cancel(db, 10, 5) is False

    async def test_prune_returns_rowcount(self, db):
        result = MagicMock()
        result.rowcount = 4
        db.execute = AsyncMock(return_value=result)

        assert await ListingRepository().prune_cart_entries(db, 5) == 4
