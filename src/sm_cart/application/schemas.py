"""Pydantic schemas for sm_cart API."""

from pydantic import BaseModel, Field

from src.sm_cart.domain.models import CartItem
from src.sm_common.cents import cents_to_display
from src.sm_listing.application.schemas import ListingResponse


class AddToCartRequest(BaseModel):
    listing_id: int = Field(..., gt=0)


class CartItemResponse(BaseModel):
    cart_item_id: str
    added_at: str
    listing: ListingResponse

    @classmethod
    def from_domain(cls, item: CartItem) -> "CartItemResponse":
        return cls(
            cart_item_id=str(item.cart_item_id),
            added_at=item.added_at.isoformat(),
            listing=ListingResponse.from_domain(item.listing),
        )


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    item_count: int
    total_cents: int
    total_display: str

    @classmethod
    def build(cls, items: list[CartItemResponse], total_cents: int) -> "CartResponse":
        return cls(
            items=items,
            item_count=len(items),
            total_cents=total_cents,
            total_display=cents_to_display(total_cents),
        )


class AddToCartResponse(BaseModel):
    cart_item_id: str
    listing_id: str
    added_at: str


class ClearCartResponse(BaseModel):
    removed: int
