"""Global enums: must match DB CHECK constraints exactly (see alembic/versions)."""

from enum import Enum


class ListingStatus(str, Enum):
    """One-way lifecycle: LISTED -> SOLD | CANCELLED, both terminal."""
    LISTED = "listed"
    SOLD = "sold"
    CANCELLED = "cancelled"


class TransactionType(str, Enum):
    PURCHASE = "purchase"
    SALE = "sale"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class ListingSort(str, Enum):
    NEWEST = "newest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    FLOAT_ASC = "float-asc"
    FLOAT_DESC = "float-desc"
