"""
Units - Conversions between human amounts, base units and hex quantities.

Amounts are scaled into base units with integer arithmetic on the decimal
digits, so no precision is lost for large balances. Scaling truncates toward
zero; it never rounds up.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Union

from ..exceptions import InvalidAmount, MalformedHex

NATIVE_DECIMALS = 18  # MON
USDC_DECIMALS = 6

MAX_UINT256 = 2**256 - 1

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")

AmountLike = Union[Decimal, int, float, str]


def to_decimal(amount: AmountLike) -> Decimal:
    """
    Coerce a user-supplied amount into a Decimal.

    Floats go through their shortest repr, so ``0.1`` is one tenth rather
    than the nearest binary double.

    Raises:
        InvalidAmount: If the value is not a number
    """
    if isinstance(amount, bool):
        raise InvalidAmount(f"Invalid amount: {amount!r}")
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, int):
        return Decimal(amount)
    if isinstance(amount, float):
        return Decimal(repr(amount))
    if isinstance(amount, str):
        try:
            return Decimal(amount.strip())
        except InvalidOperation as exc:
            raise InvalidAmount(f"Invalid amount: {amount!r}") from exc
    raise InvalidAmount(f"Unsupported amount type: {type(amount).__name__}")


def to_fixed_point_units(amount: AmountLike, decimals: int) -> int:
    """
    Convert a human-readable amount into integer base units.

    Args:
        amount: Positive finite amount (e.g. ``"1.5"`` MON)
        decimals: Token precision (18 for MON, 6 for USDC)

    Returns:
        ``floor(amount * 10**decimals)``

    Raises:
        InvalidAmount: If the amount is non-finite, non-positive, too large
            for a uint256, or truncates to zero units
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidAmount(f"Invalid token decimals: {decimals!r}")

    value = to_decimal(amount)
    if not value.is_finite():
        raise InvalidAmount(f"Amount must be finite: {amount!r}")
    if value <= 0:
        raise InvalidAmount("Amount must be > 0")
    if value.adjusted() + decimals >= 78:
        raise InvalidAmount(f"Amount too large: {amount!r}")
    if value.adjusted() + decimals < 0:
        raise InvalidAmount(
            f"Amount {value} is too small for {decimals} token decimals"
        )

    _, digits, exponent = value.as_tuple()
    coefficient = int("".join(str(d) for d in digits))
    shift = exponent + decimals
    if shift >= 0:
        units = coefficient * 10**shift
    else:
        units = coefficient // 10 ** (-shift)

    if units == 0:
        raise InvalidAmount(
            f"Amount {value} is too small for {decimals} token decimals"
        )
    if units > MAX_UINT256:
        raise InvalidAmount(f"Amount too large: {amount!r}")
    return units


def hex_to_int(value: str) -> int:
    """Parse an RPC hex quantity (``0x`` prefix optional)."""
    if not isinstance(value, str):
        raise MalformedHex(f"Expected hex string, got {type(value).__name__}")

    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if not _HEX_DIGITS.fullmatch(digits):
        raise MalformedHex(f"Malformed hex quantity: {value!r}")
    return int(digits, 16)


def units_to_decimal_string(units: int, decimals: int, precision: int = 6) -> str:
    """
    Format base units for display, e.g. ``1500000, 6, 2 -> "1.50"``.

    Fractional digits beyond ``precision`` are truncated.
    """
    if units < 0:
        raise ValueError(f"Units must be non-negative: {units}")
    if decimals < 0 or precision < 0:
        raise ValueError("decimals and precision must be non-negative")

    whole, frac = divmod(units, 10**decimals)
    if precision == 0:
        return str(whole)

    frac_digits = str(frac).rjust(decimals, "0") if decimals else ""
    frac_digits = frac_digits[:precision].ljust(precision, "0")
    return f"{whole}.{frac_digits}"
