"""Tests for sm_common.cents."""

from decimal import Decimal

import pytest

from src.sm_common.cents import cents_to_display, decimal_to_cents, sum_cents, validate_price


class TestValidatePrice:
    def test_positive_ok(self) -> None:
        validate_price(1)
        validate_price(6500)

    @pytest.mark.parametrize("price", [0, -1, -6500])
    def test_non_positive_rejected(self, price: int) -> None:
        with pytest.raises(ValueError):
            validate_price(price)


class TestCentsToDisplay:
    def test_whole_dollars(self) -> None:
        assert cents_to_display(6500) == "$65.00"

    def test_thousands_separator(self) -> None:
        assert cents_to_display(123456) == "$1,234.56"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "$0.00"

    def test_single_cent(self) -> None:
        assert cents_to_display(1) == "$0.01"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-$12.00"


class TestDecimalToCents:
    def test_string_two_places(self) -> None:
        assert decimal_to_cents("12.50") == 1250

    def test_decimal_input(self) -> None:
        assert decimal_to_cents(Decimal("30.00")) == 3000

    def test_integer_string(self) -> None:
        assert decimal_to_cents("100") == 10000

    def test_rounds_half_up(self) -> None:
        assert decimal_to_cents("0.005") == 1
        assert decimal_to_cents("0.004") == 0

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity"])
    def test_rejects_non_decimal(self, value: str) -> None:
        with pytest.raises(ValueError):
            decimal_to_cents(value)


class TestSumCents:
    def test_sums_ints(self) -> None:
        assert sum_cents([3000, 5000]) == 8000

    def test_empty_is_zero(self) -> None:
        assert sum_cents([]) == 0

    def test_float_rejected(self) -> None:
        with pytest.raises(TypeError):
            sum_cents([3000, 0.1])  # type: ignore[list-item]

    def test_bool_rejected(self) -> None:
        with pytest.raises(TypeError):
            sum_cents([True])  # type: ignore[list-item]

    def test_no_float_drift(self) -> None:
        # 0.1 + 0.2 style drift cannot happen on cents
        assert sum_cents([10, 20]) == 30
