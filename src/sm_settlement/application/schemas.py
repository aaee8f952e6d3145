"""Pydantic schemas for the checkout endpoint."""

from pydantic import BaseModel

from src.sm_common.cents import cents_to_display
from src.sm_settlement.domain.models import SettlementResult


class CheckoutResponse(BaseModel):
    total_cents: int
    total_display: str
    item_count: int
    listing_ids: list[str]
    balance_cents: int
    balance_display: str

    @classmethod
    def from_result(cls, result: SettlementResult) -> "CheckoutResponse":
        return cls(
            total_cents=result.total_cents,
            total_display=cents_to_display(result.total_cents),
            item_count=result.item_count,
            listing_ids=[str(i) for i in result.listing_ids],
            balance_cents=result.balance_after,
            balance_display=cents_to_display(result.balance_after),
        )
