"""Unit tests for the settlement availability check."""

from src.sm_settlement.domain.availability import check_availability, with_current_status
from src.sm_settlement.domain.models import CartLine


def _line(listing_id: int, status: str = "listed") -> CartLine:
    return CartLine(
        listing_id=listing_id, name=f"Skin {listing_id}", price=1000, seller_id=2, status=status
    )


def test_all_listed_is_available() -> None:
    result = check_availability([_line(1), _line(2)])
    assert result.all_available is True
    assert result.report() == []


def test_partial_unavailability_reports_subset() -> None:
    result = check_availability([_line(1), _line(2, "sold"), _line(3, "cancelled")])
    assert result.all_available is False
    assert result.report() == [
        {"listing_id": "2", "name": "Skin 2"},
        {"listing_id": "3", "name": "Skin 3"},
    ]


def test_everything_unavailable() -> None:
    result = check_availability([_line(1, "sold")])
    assert [line.listing_id for line in result.unavailable] == [1]


def test_empty_batch_is_trivially_available() -> None:
    assert check_availability([]).all_available is True


def test_locked_statuses_replace_stale_ones() -> None:
    stale = [_line(1), _line(2)]
    fresh = with_current_status(stale, {1: "listed", 2: "sold"})

    assert [line.status for line in fresh] == ["listed", "sold"]
    assert stale[1].status == "listed"
    assert check_availability(fresh).report() == [{"listing_id": "2", "name": "Skin 2"}]


def test_vanished_listing_is_unavailable() -> None:
    fresh = with_current_status([_line(1), _line(2)], {1: "listed"})
    assert [line.listing_id for line in check_availability(fresh).unavailable] == [2]
