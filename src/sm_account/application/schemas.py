"""Pydantic schemas and cursor utilities for sm_account API."""

import base64
import json

from pydantic import BaseModel, Field

from src.sm_account.domain.models import ProfileStats, Transaction, UserAccount
from src.sm_common.cents import cents_to_display
from src.sm_common.datetime_utils import iso_or_none

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to deposit in cents")


class WithdrawRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to withdraw in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProfileResponse(BaseModel):
    user_id: str
    steam_id: str
    username: str
    avatar: str
    profile_url: str
    balance_cents: int
    balance_display: str
    total_sales_cents: int
    total_sales_display: str
    total_purchases_cents: int
    total_purchases_display: str
    active_listings: int
    total_sold: int
    created_at: str

    @classmethod
    def from_domain(cls, user: UserAccount, stats: ProfileStats) -> "ProfileResponse":
        return cls(
            user_id=str(user.id),
            steam_id=user.steam_id,
            username=user.username,
            avatar=user.avatar,
            profile_url=user.profile_url,
            balance_cents=user.balance,
            balance_display=cents_to_display(user.balance),
            total_sales_cents=user.total_sales,
            total_sales_display=cents_to_display(user.total_sales),
            total_purchases_cents=user.total_purchases,
            total_purchases_display=cents_to_display(user.total_purchases),
            active_listings=stats.active_listings,
            total_sold=stats.total_sold,
            created_at=user.created_at.isoformat(),
        )


class BalanceChangeResponse(BaseModel):
    user_id: str
    balance_cents: int
    balance_display: str
    amount_cents: int
    amount_display: str
    transaction_id: int

    @classmethod
    def from_result(cls, user: UserAccount, entry: Transaction) -> "BalanceChangeResponse":
        return cls(
            user_id=str(user.id),
            balance_cents=user.balance,
            balance_display=cents_to_display(user.balance),
            amount_cents=entry.amount,
            amount_display=cents_to_display(entry.amount),
            transaction_id=entry.id,
        )


class TransactionItem(BaseModel):
    id: int
    type: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    description: str | None
    listing_id: str | None
    listing_name: str | None
    status: str
    created_at: str | None

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionItem":
        return cls(
            id=t.id,
            type=t.type,
            amount_cents=t.amount,
            amount_display=cents_to_display(t.amount),
            balance_after_cents=t.balance_after,
            description=t.description,
            listing_id=str(t.listing_id) if t.listing_id is not None else None,
            listing_name=t.listing_name,
            status=t.status,
            created_at=iso_or_none(t.created_at),
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool
