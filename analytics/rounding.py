"""Half-up rounding helpers shared by the scoring metrics.

Python's built-in ``round`` uses banker's rounding; metrics here always
round halves upward (towards +inf), e.g. 2.25 -> 2.3 and 62.5 -> 63.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves upward."""
    return int(math.floor(value + 0.5))


def round1(value: float) -> float:
    """Round to one decimal place, halves upward."""
    return math.floor(value * 10 + 0.5) / 10


def percentage(made: int, eligible: int):
    """Whole-number percentage, or None when there is nothing to divide by."""
    if not eligible:
        return None
    return round_half_up(made / eligible * 100)
