"""
money.py — Decimal helpers for fees and payment amounts.

Amounts are Decimal end to end and leave the API as strings with exactly two
decimal places ("15.00"), never as JSON numbers. The payment processor works
in integer minor units (cents).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def quantize(value: Decimal | int | str) -> Decimal:
    return Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def to_money_str(value: Decimal | int | str) -> str:
    return str(quantize(value))


def to_minor_units(value: Decimal | int | str) -> int:
    """Decimal("15.5") → 1550."""
    return int((Decimal(value) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
