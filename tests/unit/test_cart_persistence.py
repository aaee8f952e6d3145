# tests/unit/test_cart_persistence.py
"""Unit tests for CartRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sm_cart.infrastructure.persistence import CartRepository


@pytest.fixture
def db():
    return MagicMock()


def _result(row):
    result = MagicMock()
    result.fetchone.return_value = row
    return result


class TestAddEntry:
    async def test_inserted(self, db):
        row = MagicMock(id=100, user_id=1, listing_id=5, added_at=datetime.now(UTC))
        db.execute = AsyncMock(return_value=_result(row))

        entry = await CartRepository().add_entry(db, 1, 5)

        assert entry is not None
        assert entry.listing_id == 5
        assert "ON CONFLICT (user_id, listing_id) DO NOTHING" in str(db.execute.call_args.args[0])

    async def test_conflict_returns_none(self, db):
        db.execute = AsyncMock(return_value=_result(None))

        assert await CartRepository().add_entry(db, 1, 5) is None


class TestGetTarget:
    async def test_maps_row(self, db):
        db.execute = AsyncMock(return_value=_result(MagicMock(id=5, seller_id=2, status="listed")))

        target = await CartRepository().get_target(db, 5)

        assert target is not None
        assert target.seller_id == 2
        assert target.status == "listed"


class TestRemoveAndClear:
    async def test_remove_hit_and_miss(self, db):
        db.execute = AsyncMock(side_effect=[_result(MagicMock(id=1)), _result(None)])
        repo = CartRepository()

        assert await repo.remove_entry(db, 1, 5) is True
        assert await repo.remove_entry(db, 1, 5) is False

    async def test_clear_rowcount(self, db):
        result = MagicMock()
        result.rowcount = 2
        db.execute = AsyncMock(return_value=result)

        assert await CartRepository().clear(db, 1) == 2


class TestListItems:
    async def test_only_listed_rows_are_queried(self, db):
        result = MagicMock()
        result.fetchall.return_value = []
        db.execute = AsyncMock(return_value=result)

        assert await CartRepository().list_items(db, 1) == []
        sql = str(db.execute.call_args.args[0])
        assert "l.status = 'listed'" in sql
        assert "ORDER BY ci.added_at DESC" in sql
