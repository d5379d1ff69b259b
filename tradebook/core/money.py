"""Decimal context, currency reference data and scale checks.

All premium arithmetic uses BOOKING_DECIMAL_CONTEXT with prec=28,
ROUND_HALF_EVEN, and traps for InvalidOperation/DivisionByZero/Overflow.
Scale checks read the Decimal exponent, so "100000.00" has two fractional
digits and "100000.001" has three, exactly as the caller typed them.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)

BOOKING_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

# Currencies quoted every day in size. Anything else is accepted with an advisory.
MAJOR_CURRENCIES: frozenset[str] = frozenset({
    "USD", "EUR", "JPY", "GBP", "CHF", "CAD", "AUD", "NZD", "SEK", "NOK",
    "DKK", "SGD", "HKD", "CNY", "INR", "KRW", "MXN", "BRL", "ZAR", "RUB", "TRY",
})

# Base currencies conventionally quoted against USD (EUR/USD, not USD/EUR).
USD_QUOTED_BASES: frozenset[str] = frozenset({"EUR", "GBP", "AUD", "NZD"})

def normalize_currency(code: str) -> str:
    return code.strip().upper()


def is_major_currency(code: str) -> bool:
    return normalize_currency(code) in MAJOR_CURRENCIES


def fractional_digits(value: Decimal) -> int:
    """Number of digits after the decimal point as written (scale)."""
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int):  # NaN / Infinity
        return 0
    return max(0, -exponent)

