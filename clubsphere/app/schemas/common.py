"""
schemas/common.py — Validators shared by several resource schemas.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import ValidationError


def validate_non_empty_after_trim(value: str) -> None:
    """
    Raises ValidationError if the string is blank or contains only whitespace.
    validate.Length(min=1) alone would accept "   ".
    """
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


def validate_fee(value: Decimal) -> None:
    """Fees are zero or positive with at most 2 decimal places."""
    if value < Decimal("0"):
        raise ValidationError("Fee cannot be negative.")

    # exponent is the negated number of decimal places: "10.123" → -3.
    if value.as_tuple().exponent < -2:
        raise ValidationError("Fee must have at most 2 decimal places.")
