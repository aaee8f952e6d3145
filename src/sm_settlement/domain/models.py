"""Domain models for sm_settlement: pure dataclasses, no business logic."""

from dataclasses import dataclass, field


@dataclass
class CartLine:
    """One cart entry as read at checkout: the listing's current price, seller and status."""

    listing_id: int
    name: str
    price: int          # cents
    seller_id: int
    status: str


@dataclass
class AvailabilityResult:
    unavailable: list[CartLine] = field(default_factory=list)

    @property
    def all_available(self) -> bool:
        return not self.unavailable

    def report(self) -> list[dict[str, object]]:
        return [
            {"listing_id": str(line.listing_id), "name": line.name}
            for line in self.unavailable
        ]


@dataclass
class SettlementResult:
    buyer_id: int
    total_cents: int
    item_count: int
    listing_ids: list[int]
    balance_after: int
