"""Tests for sm_account Pydantic schemas and cursor utilities."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.sm_account.application.schemas import (
    DepositRequest,
    ProfileResponse,
    TransactionItem,
    WithdrawRequest,
    cursor_decode,
    cursor_encode,
)
from src.sm_account.domain.models import ProfileStats, Transaction, UserAccount


class TestAmountRequests:
    def test_valid(self) -> None:
        assert DepositRequest(amount_cents=10000).amount_cents == 10000
        assert WithdrawRequest(amount_cents=5000).amount_cents == 5000

    @pytest.mark.parametrize("amount", [0, -100])
    def test_non_positive_rejected(self, amount: int) -> None:
        with pytest.raises(ValidationError):
            DepositRequest(amount_cents=amount)
        with pytest.raises(ValidationError):
            WithdrawRequest(amount_cents=amount)


class TestCursor:
    def test_roundtrip(self) -> None:
        assert cursor_decode(cursor_encode(12345)) == 12345

    def test_none(self) -> None:
        assert cursor_decode(None) is None

    def test_garbage_returns_none(self) -> None:
        assert cursor_decode("not-base64!!") is None
        assert cursor_decode("e30=") is None  # "{}"


class TestProfileResponse:
    def test_from_domain(self) -> None:
        user = UserAccount(
            id=3,
            steam_id="76561198000000003",
            username="carol",
            avatar="",
            profile_url="",
            balance=2000,
            total_sales=123456,
            total_purchases=8000,
            created_at=datetime(2026, 1, 2, tzinfo=UTC),
        )
        resp = ProfileResponse.from_domain(user, ProfileStats(active_listings=4, total_sold=9))
        assert resp.user_id == "3"
        assert resp.balance_display == "$20.00"
        assert resp.total_sales_display == "$1,234.56"
        assert resp.active_listings == 4
        assert resp.total_sold == 9


class TestTransactionItem:
    def test_purchase_row(self) -> None:
        t = Transaction(
            id=10,
            user_id=1,
            type="purchase",
            amount=3000,
            balance_after=7000,
            listing_id=55,
            listing_name="AK-47 | Redline",
            description="Purchased AK-47 | Redline for $30.00",
            created_at=datetime(2026, 1, 2, tzinfo=UTC),
        )
        item = TransactionItem.from_domain(t)
        assert item.listing_id == "55"
        assert item.amount_display == "$30.00"
        assert item.balance_after_cents == 7000
        assert item.created_at == "2026-01-02T00:00:00+00:00"

    def test_deposit_row_has_no_listing(self) -> None:
        t = Transaction(id=1, user_id=1, type="deposit", amount=100, balance_after=100)
        item = TransactionItem.from_domain(t)
        assert item.listing_id is None
        assert item.created_at is None
