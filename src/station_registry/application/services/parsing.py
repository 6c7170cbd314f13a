"""Parsing helpers for string-typed form fields."""

import math


def clean(value: str | None) -> str:
    """Trim a text field; None becomes an empty string."""
    return (value or "").strip()


def parse_decimal(value: str | None) -> float | None:
    """Parse a decimal string, accepting a comma as decimal separator.

    Returns None for empty, unparseable or non-finite input.
    """
    text = clean(value).replace(",", ".")
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_count(value: str | None) -> int:
    """Parse a non-negative integer count; anything else is 0."""
    try:
        return max(int(clean(value)), 0)
    except ValueError:
        return 0
