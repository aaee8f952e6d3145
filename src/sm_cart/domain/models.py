"""Domain models for sm_cart."""

from dataclasses import dataclass
from datetime import datetime

from src.sm_listing.domain.models import Listing


@dataclass
class CartEntry:
    id: int
    user_id: int
    listing_id: int
    added_at: datetime


@dataclass
class CartItem:
    """A cart entry joined with the listing it references."""

    cart_item_id: int
    added_at: datetime
    listing: Listing


@dataclass
class CartTarget:
    """The slice of a listing needed to decide whether it may enter a cart."""

    listing_id: int
    seller_id: int
    status: str
