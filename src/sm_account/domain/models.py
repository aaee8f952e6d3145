"""Domain models for sm_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserAccount:
    id: int
    steam_id: str
    username: str
    avatar: str
    profile_url: str
    balance: int             # cents
    total_sales: int         # cents
    total_purchases: int     # cents
    created_at: datetime


@dataclass
class ProfileStats:
    active_listings: int
    total_sold: int


@dataclass
class Transaction:
    id: int                          # BIGSERIAL
    user_id: int
    type: str                        # TransactionType value
    amount: int                      # cents, always positive; type gives direction
    balance_after: int               # cents, balance snapshot after op
    status: str = "completed"
    listing_id: int | None = None
    listing_name: str | None = None  # joined for history reads only
    description: str | None = None
    created_at: datetime | None = None
