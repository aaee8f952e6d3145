"""Unit tests for CartApplicationService using a mock repository."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sm_cart.application.service import CartApplicationService
from src.sm_cart.domain.models import CartEntry, CartItem, CartTarget
from src.sm_common.errors import (
    CartEntryNotFoundError,
    DuplicateCartEntryError,
    ListingNotFoundError,
    SelfPurchaseError,
)
from src.sm_listing.domain.models import Listing

BUYER = 1
SELLER = 2


def _listing(listing_id: int, price: int) -> Listing:
    return Listing(
        id=listing_id,
        seller_id=SELLER,
        name=f"Item {listing_id}",
        weapon="M4A1-S",
        category="Rifle",
        rarity="Classified",
        wear="Minimal Wear",
        float_value=Decimal("0.1"),
        price=price,
        image_url="",
        stattrak=False,
        collection=None,
        inspect_link=None,
        steam_asset_id=None,
        status="listed",
        listed_at=datetime.now(UTC),
    )


def _entry(listing_id: int = 5) -> CartEntry:
    return CartEntry(id=100, user_id=BUYER, listing_id=listing_id, added_at=datetime.now(UTC))


class TestAddToCart:
    async def test_adds_listed_item(self) -> None:
        repo = AsyncMock()
        repo.get_target.return_value = CartTarget(listing_id=5, seller_id=SELLER, status="listed")
        repo.add_entry.return_value = _entry(5)
        svc = CartApplicationService(repo=repo)
        db = AsyncMock()

        result = await svc.add_to_cart(db, BUYER, 5)

        assert result.listing_id == "5"
        assert result.cart_item_id == "100"
        db.commit.assert_awaited_once()

    async def test_missing_listing_is_not_found(self) -> None:
        repo = AsyncMock()
        repo.get_target.return_value = None
        svc = CartApplicationService(repo=repo)
        db = AsyncMock()

        with pytest.raises(ListingNotFoundError):
            await svc.add_to_cart(db, BUYER, 5)
        db.rollback.assert_awaited_once()

    @pytest.mark.parametrize("status", ["sold", "cancelled"])
    async def test_unlisted_listing_is_not_found(self, status: str) -> None:
        repo = AsyncMock()
        repo.get_target.return_value = CartTarget(listing_id=5, seller_id=SELLER, status=status)
        svc = CartApplicationService(repo=repo)

        with pytest.raises(ListingNotFoundError):
            await svc.add_to_cart(AsyncMock(), BUYER, 5)
        repo.add_entry.assert_not_awaited()

    async def test_own_listing_rejected(self) -> None:
        repo = AsyncMock()
        repo.get_target.return_value = CartTarget(listing_id=5, seller_id=BUYER, status="listed")
        svc = CartApplicationService(repo=repo)

        with pytest.raises(SelfPurchaseError) as exc_info:
            await svc.add_to_cart(AsyncMock(), BUYER, 5)
        assert exc_info.value.http_status == 422
        repo.add_entry.assert_not_awaited()

    async def test_second_add_is_conflict(self) -> None:
        repo = AsyncMock()
        repo.get_target.return_value = CartTarget(listing_id=5, seller_id=SELLER, status="listed")
        repo.add_entry.return_value = None
        svc = CartApplicationService(repo=repo)
        db = AsyncMock()

        with pytest.raises(DuplicateCartEntryError) as exc_info:
            await svc.add_to_cart(db, BUYER, 5)
        assert exc_info.value.http_status == 409
        db.rollback.assert_awaited_once()


class TestRemoveFromCart:
    async def test_removes(self) -> None:
        repo = AsyncMock()
        repo.remove_entry.return_value = True
        svc = CartApplicationService(repo=repo)
        db = AsyncMock()

        await svc.remove_from_cart(db, BUYER, 5)

        db.commit.assert_awaited_once()

    async def test_absent_entry_is_not_found(self) -> None:
        repo = AsyncMock()
        repo.remove_entry.return_value = False
        svc = CartApplicationService(repo=repo)
        db = AsyncMock()

        with pytest.raises(CartEntryNotFoundError):
            await svc.remove_from_cart(db, BUYER, 5)
        db.rollback.assert_awaited_once()


class TestClearCart:
    async def test_returns_count(self) -> None:
        repo = AsyncMock()
        repo.clear.return_value = 3
        svc = CartApplicationService(repo=repo)

        result = await svc.clear_cart(AsyncMock(), BUYER)

        assert result.removed == 3

    async def test_empty_cart_is_fine(self) -> None:
        repo = AsyncMock()
        repo.clear.return_value = 0
        svc = CartApplicationService(repo=repo)
        db = AsyncMock()

        result = await svc.clear_cart(db, BUYER)

        assert result.removed == 0
        db.commit.assert_awaited_once()


class TestListCart:
    async def test_totals_current_prices(self) -> None:
        repo = AsyncMock()
        now = datetime.now(UTC)
        repo.list_items.return_value = [
            CartItem(cart_item_id=2, added_at=now, listing=_listing(11, 3000)),
            CartItem(cart_item_id=1, added_at=now, listing=_listing(12, 5000)),
        ]
        svc = CartApplicationService(repo=repo)

        result = await svc.list_cart(MagicMock(), BUYER)

        assert result.item_count == 2
        assert result.total_cents == 8000
        assert result.total_display == "$80.00"
        assert result.items[0].listing.id == "11"

    async def test_empty(self) -> None:
        repo = AsyncMock()
        repo.list_items.return_value = []
        svc = CartApplicationService(repo=repo)

        result = await svc.list_cart(MagicMock(), BUYER)

        assert result.items == []
        assert result.total_cents == 0
