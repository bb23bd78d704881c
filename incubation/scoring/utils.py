"""Decimal utilities for score arithmetic.

All weighted scores are computed with Decimal and ROUND_HALF_UP so that a
7.25 always displays as 7.3, never 7.2 as binary floats can.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional


def to_decimal(value: float, places: int = 4) -> Decimal:
    """Convert float to Decimal with explicit precision and ROUND_HALF_UP rounding.

    Args:
        value: Numeric value to convert.
        places: Number of decimal places to quantize to.

    Returns:
        Decimal with the specified precision.
    """
    if isinstance(value, Decimal):
        return value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(
        Decimal(10) ** -places,
        rounding=ROUND_HALF_UP,
    )


def exact_decimal(value) -> Decimal:
    """Decimal from a float via its shortest repr, without quantizing."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Decimal, places: int = 1) -> Decimal:
    """Round for display: one decimal, halves away from zero."""
    return value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal(0),
    max_val: Decimal = Decimal(10),
) -> Decimal:
    """Clamp a Decimal value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def weighted_sum(values: List[Decimal], weights: List[Decimal], places: Optional[int] = 4) -> Decimal:
    """Sum of value × weight, quantized to ``places`` decimals (None keeps it exact).

    Raises:
        ValueError: If lengths differ.
    """
    if len(values) != len(weights):
        raise ValueError("Values and weights must have the same length")
    if not values:
        return Decimal(0)
    total = sum(v * w for v, w in zip(values, weights))
    if places is None:
        return total
    return total.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def mean(values: List[Decimal]) -> Decimal:
    """Arithmetic mean; 0 for an empty list."""
    if not values:
        return Decimal(0)
    return (sum(values) / Decimal(len(values))).quantize(
        Decimal("0.0001"), rounding=ROUND_HALF_UP
    )
