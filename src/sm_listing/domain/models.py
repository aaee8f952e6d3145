"""Domain models for sm_listing: pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class Listing:
    id: int
    seller_id: int
    name: str
    weapon: str
    category: str
    rarity: str
    wear: str
    float_value: Decimal
    price: int                      # cents
    image_url: str
    stattrak: bool
    collection: str | None
    inspect_link: str | None
    steam_asset_id: str | None
    status: str                     # ListingStatus value
    listed_at: datetime
    seller_name: str = ""
    seller_avatar: str = ""


@dataclass
class NewListing:
    """Validated fields for a listing about to be inserted. Price already in cents."""

    name: str
    weapon: str
    category: str
    rarity: str
    wear: str
    price: int
    float_value: Decimal = Decimal("0")
    image_url: str = ""
    stattrak: bool = False
    collection: str | None = None
    inspect_link: str | None = None
    steam_asset_id: str | None = None


@dataclass
class ListingFilter:
    search: str | None = None
    categories: list[str] = field(default_factory=list)
    rarities: list[str] = field(default_factory=list)
    wears: list[str] = field(default_factory=list)
    stattrak_only: bool = False
    price_min: int | None = None    # cents
    price_max: int | None = None    # cents
