"""Unit tests for pneuma/units.py."""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, localcontext

import pytest

from buddyevents.exceptions import InvalidAmount, MalformedHex
from buddyevents.pneuma.units import (
    NATIVE_DECIMALS,
    USDC_DECIMALS,
    hex_to_int,
    to_fixed_point_units,
    units_to_decimal_string,
)


def _floor_scaled(amount: str, decimals: int) -> int:
    with localcontext() as ctx:
        ctx.prec = 120
        scaled = Decimal(amount) * (Decimal(10) ** decimals)
        return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


class TestToFixedPointUnits:
    """Tests for to_fixed_point_units."""

    def test_native_amount(self) -> None:
        assert to_fixed_point_units("1.5", NATIVE_DECIMALS) == 1_500_000_000_000_000_000

    def test_float_amount(self) -> None:
        assert to_fixed_point_units(1.5, NATIVE_DECIMALS) == 1_500_000_000_000_000_000

    def test_usdc_amount(self) -> None:
        assert to_fixed_point_units(2.5, USDC_DECIMALS) == 2_500_000

    def test_float_uses_shortest_repr(self) -> None:
        # Decimal(0.1) would be 0.1000000000000000055...
        assert to_fixed_point_units(0.1, NATIVE_DECIMALS) == 10**17

    def test_truncates_instead_of_rounding(self) -> None:
        assert to_fixed_point_units("1.2345679", USDC_DECIMALS) == 1_234_567
        assert to_fixed_point_units("0.9999999", USDC_DECIMALS) == 999_999

    def test_exponent_notation(self) -> None:
        assert to_fixed_point_units("1E+2", USDC_DECIMALS) == 100_000_000
        assert to_fixed_point_units("1e-6", USDC_DECIMALS) == 1

    def test_huge_negative_exponent_is_too_small(self) -> None:
        with pytest.raises(InvalidAmount, match="too small"):
            to_fixed_point_units("1e-999999999", USDC_DECIMALS)

    def test_zero_decimals(self) -> None:
        assert to_fixed_point_units("7.9", 0) == 7

    def test_large_balance_is_exact(self) -> None:
        amount = "123456789012345678901234.123456789012345678"
        assert to_fixed_point_units(amount, NATIVE_DECIMALS) == int(
            "123456789012345678901234123456789012345678"
        )

    @pytest.mark.parametrize(
        "amount,decimals",
        [
            ("0.000001", 6),
            ("3.14159265358979", 18),
            ("42", 6),
            ("0.333333333333333333333", 18),
            ("98765.4321", 2),
        ],
    )
    def test_equals_floor_of_scaled_amount(self, amount: str, decimals: int) -> None:
        assert to_fixed_point_units(amount, decimals) == _floor_scaled(amount, decimals)

    @pytest.mark.parametrize("amount", [0, "0", "0.0", -1, "-2.5", -0.5])
    def test_rejects_non_positive(self, amount: object) -> None:
        with pytest.raises(InvalidAmount):
            to_fixed_point_units(amount, USDC_DECIMALS)  # type: ignore[arg-type]

    def test_rejects_amount_truncating_to_zero(self) -> None:
        with pytest.raises(InvalidAmount, match="too small"):
            to_fixed_point_units("0.0000001", USDC_DECIMALS)

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), "Infinity", "NaN"])
    def test_rejects_non_finite(self, amount: object) -> None:
        with pytest.raises(InvalidAmount):
            to_fixed_point_units(amount, USDC_DECIMALS)  # type: ignore[arg-type]

    @pytest.mark.parametrize("amount", ["", "abc", "1.2.3", True, None])
    def test_rejects_garbage(self, amount: object) -> None:
        with pytest.raises(InvalidAmount):
            to_fixed_point_units(amount, USDC_DECIMALS)  # type: ignore[arg-type]

    def test_rejects_uint256_overflow(self) -> None:
        with pytest.raises(InvalidAmount, match="too large"):
            to_fixed_point_units("1e70", NATIVE_DECIMALS)

    def test_rejects_negative_decimals(self) -> None:
        with pytest.raises(InvalidAmount):
            to_fixed_point_units("1", -1)

    def test_invalid_amount_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            to_fixed_point_units("0", USDC_DECIMALS)


class TestHexToInt:
    """Tests for hex_to_int."""

    def test_prefixed(self) -> None:
        assert hex_to_int("0x279f") == 10143

    def test_unprefixed_uppercase(self) -> None:
        assert hex_to_int("1A") == 26

    def test_uppercase_prefix(self) -> None:
        assert hex_to_int("0X10") == 16

    def test_zero(self) -> None:
        assert hex_to_int("0x0") == 0

    def test_large_word(self) -> None:
        assert hex_to_int("0x" + "f" * 64) == 2**256 - 1

    @pytest.mark.parametrize("value", ["", "0x", "0xzz", "0x 1", "12g4", "0x1\n"])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(MalformedHex):
            hex_to_int(value)

    def test_rejects_non_string(self) -> None:
        with pytest.raises(MalformedHex):
            hex_to_int(16)  # type: ignore[arg-type]


class TestUnitsToDecimalString:
    """Tests for units_to_decimal_string."""

    def test_native(self) -> None:
        assert units_to_decimal_string(1_500_000_000_000_000_000, 18, 6) == "1.500000"

    def test_usdc_short_precision(self) -> None:
        assert units_to_decimal_string(2_500_000, 6, 2) == "2.50"

    def test_truncates_dust(self) -> None:
        assert units_to_decimal_string(1, 18, 6) == "0.000000"
        assert units_to_decimal_string(1_999_999, 6, 1) == "1.9"

    def test_zero_precision(self) -> None:
        assert units_to_decimal_string(2_500_000, 6, 0) == "2"

    def test_precision_beyond_decimals_pads(self) -> None:
        assert units_to_decimal_string(5, 0, 2) == "5.00"
        assert units_to_decimal_string(1_500_000, 6, 8) == "1.50000000"

    def test_roundtrip_preserves_fraction_digits(self) -> None:
        for amount in ("1.234567", "0.000001", "1000000.5"):
            units = to_fixed_point_units(amount, USDC_DECIMALS)
            assert Decimal(units_to_decimal_string(units, 6, 6)) == Decimal(amount)

    def test_rejects_negative_units(self) -> None:
        with pytest.raises(ValueError):
            units_to_decimal_string(-1, 6, 6)
