"""Integer arithmetic utilities for cents-based balances and prices.

All prices, amounts, and balances use int (cents): fixed-point with two
decimal places. No float anywhere on the money path.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def validate_price(price: int) -> None:
    """Validate that a listing price is a positive number of cents."""
    if price <= 0:
        raise ValueError(f"Price must be positive, got {price}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def decimal_to_cents(value: str | Decimal) -> int:
    """Parse a decimal amount ('12.50') into cents, rounding half-up at 2 places.

    Raises ValueError for anything that is not a finite decimal.
    """
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Not a decimal amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def sum_cents(amounts: list[int]) -> int:
    """Sum a batch of cent amounts; rejects non-int inputs so floats never leak in."""
    total = 0
    for amount in amounts:
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError(f"Cent amounts must be int, got {type(amount).__name__}")
        total += amount
    return total
