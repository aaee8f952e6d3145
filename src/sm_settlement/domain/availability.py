"""Availability check for a batch of cart lines read inside the settlement transaction."""

from dataclasses import replace

from src.sm_common.enums import ListingStatus
from src.sm_settlement.domain.models import AvailabilityResult, CartLine

# status given to a line whose listing row no longer exists
MISSING_STATUS = "missing"


def check_availability(lines: list[CartLine]) -> AvailabilityResult:
    """Classify the batch: every line must still be listed for checkout to proceed."""
    return AvailabilityResult(
        unavailable=[line for line in lines if line.status != ListingStatus.LISTED.value]
    )


def with_current_status(lines: list[CartLine], statuses: dict[int, str]) -> list[CartLine]:
    """Copy of `lines` carrying the statuses re-read under lock."""
    return [
        replace(line, status=statuses.get(line.listing_id, MISSING_STATUS)) for line in lines
    ]
