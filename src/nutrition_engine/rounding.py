"""Numeric helpers."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, unlike ``round``."""
    return math.floor(value + 0.5)
