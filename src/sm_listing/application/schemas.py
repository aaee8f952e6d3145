"""Pydantic schemas for sm_listing API.

Prices arrive as decimal strings/numbers with at most two places and are
converted to integer cents before they reach the repository.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.sm_common.cents import cents_to_display
from src.sm_listing.domain.models import Listing


class CreateListingRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    weapon: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    rarity: str = Field(..., min_length=1, max_length=50)
    wear: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    float_value: Decimal = Field(Decimal("0"), ge=0, le=1, max_digits=11, decimal_places=10)
    image_url: str = ""
    stattrak: bool = False
    collection: str | None = Field(None, max_length=200)
    inspect_link: str | None = None
    steam_asset_id: str | None = Field(None, max_length=50)


class ListingResponse(BaseModel):
    id: str
    name: str
    weapon: str
    category: str
    rarity: str
    wear: str
    float_value: float
    price_cents: int
    price_display: str
    image_url: str
    stattrak: bool
    seller_id: str
    seller_name: str
    seller_avatar: str
    listed_at: str
    collection: str | None
    inspect_link: str | None
    steam_asset_id: str | None
    status: str

    @classmethod
    def from_domain(cls, listing: Listing) -> "ListingResponse":
        return cls(
            id=str(listing.id),
            name=listing.name,
            weapon=listing.weapon,
            category=listing.category,
            rarity=listing.rarity,
            wear=listing.wear,
            float_value=float(listing.float_value),
            price_cents=listing.price,
            price_display=cents_to_display(listing.price),
            image_url=listing.image_url,
            stattrak=listing.stattrak,
            seller_id=str(listing.seller_id),
            seller_name=listing.seller_name,
            seller_avatar=listing.seller_avatar,
            listed_at=listing.listed_at.isoformat(),
            collection=listing.collection,
            inspect_link=listing.inspect_link,
            steam_asset_id=listing.steam_asset_id,
            status=listing.status,
        )


class ListingListResponse(BaseModel):
    items: list[ListingResponse]
    total: int
    limit: int
    offset: int


class CancelListingResponse(BaseModel):
    listing_id: str
    status: str
    cart_entries_removed: int
