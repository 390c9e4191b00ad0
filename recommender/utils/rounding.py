"""
Rounding helpers

Scores are rounded half-up (2.5 -> 3) rather than with Python's
round-half-to-even, so that reported scores match the portal's clients.
"""
import math


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round a value half-up to the given number of decimal digits

    Args:
        value: Number to round
        digits: Decimal digits to keep

    Returns:
        Rounded value
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_to_int(value: float) -> int:
    """Round half-up to an integer"""
    return int(math.floor(value + 0.5))
