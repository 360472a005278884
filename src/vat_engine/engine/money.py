"""Fixed-point money helpers.

All monetary math is done in ``Decimal`` and quantised to the currency's
minor unit with half-up rounding. Floats are converted through ``str`` so
binary representation error never leaks into an amount.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

# ISO 4217 minor-unit exponents that differ from the default of 2
MINOR_UNITS: dict[str, int] = {
    "JPY": 0,
    "ISK": 0,
    "KRW": 0,
    "CLP": 0,
    "BHD": 3,
    "KWD": 3,
    "JOD": 3,
}

DEFAULT_MINOR_UNIT = 2
HUNDRED = Decimal("100")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert *value* to ``Decimal`` without float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def minor_unit_exponent(currency: str | None) -> int:
    return MINOR_UNITS.get((currency or "").upper(), DEFAULT_MINOR_UNIT)


def quantize_money(amount: Decimal | int | float | str, currency: str | None = None) -> Decimal:
    """Round *amount* half-up to the minor unit of *currency*."""
    exponent = Decimal(1).scaleb(-minor_unit_exponent(currency))
    return to_decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, rate: Decimal, currency: str | None = None) -> Decimal:
    """``amount × rate / 100``, rounded to the currency minor unit."""
    return quantize_money(to_decimal(amount) * to_decimal(rate) / HUNDRED, currency)
